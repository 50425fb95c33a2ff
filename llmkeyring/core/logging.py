"""Logging setup: JSON or console lines tagged with request and provider context."""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

# Set by RequestContextMiddleware for the lifetime of one API request
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
# "<kind>:<provider id>" while an adapter talks to a vendor
provider_ctx: ContextVar[Optional[str]] = ContextVar("provider", default=None)


@contextmanager
def bind_provider(kind: str, provider_id: Any) -> Iterator[None]:
    """Tag every record logged inside the block with the provider it concerns."""
    token = provider_ctx.set(f"{kind}:{provider_id}")
    try:
        yield
    finally:
        provider_ctx.reset(token)


def context_fields() -> Dict[str, str]:
    fields = {}
    request_id = request_id_ctx.get()
    if request_id:
        fields["request_id"] = request_id
    provider = provider_ctx.get()
    if provider:
        fields["provider"] = provider
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **context_fields(),
        }
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """``time | level | request | provider | logger | message`` lines."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.color and record.levelname in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelname]}{level}{self.RESET}"
        fields = context_fields()
        parts = [
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            level,
            fields.get("request_id", "-")[:8],
            fields.get("provider", "-"),
            record.name,
            record.getMessage(),
        ]
        data = getattr(record, "data", None)
        if data:
            parts.append(str(data))
        line = " | ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Accepts ``data={...}`` on every call and forwards it as ``extra``."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.get("extra", {})
        if "data" in kwargs:
            extra["data"] = kwargs.pop("data")
        kwargs["extra"] = extra
        return msg, kwargs


_loggers: Dict[str, ContextLogger] = {}


def get_logger(name: str) -> ContextLogger:
    if name not in _loggers:
        _loggers[name] = ContextLogger(logging.getLogger(name), {})
    return _loggers[name]


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Replace root handlers with stdout (and optionally a JSON file)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if json_output:
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(ConsoleFormatter(color=sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    # request lines from httpx would repeat vendor URLs, some carrying keys
    for noisy in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
