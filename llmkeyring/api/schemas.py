"""Request bodies for the HTTP surface."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from llmkeyring.providers import ProviderKind


class ProviderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    kind: ProviderKind
    base_url: str = Field(alias="baseURL", min_length=1)
    default_model: str | None = Field(default=None, alias="defaultModel")
    enabled: bool = True
    extra_headers: dict[str, str] = Field(default_factory=dict, alias="extraHeaders")
    api_key: str | None = None


class ProviderUpdate(BaseModel):
    """Partial update; only fields that were sent are applied."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1)
    kind: ProviderKind | None = None
    base_url: str | None = Field(default=None, alias="baseURL", min_length=1)
    default_model: str | None = Field(default=None, alias="defaultModel")
    enabled: bool | None = None
    extra_headers: dict[str, str] | None = Field(default=None, alias="extraHeaders")


class APIKeyBody(BaseModel):
    api_key: str = Field(min_length=1)


class DefaultBody(BaseModel):
    provider_id: UUID | None = None


class MoveBody(BaseModel):
    to_index: int = Field(ge=0)


class SuggestBody(BaseModel):
    url: str
