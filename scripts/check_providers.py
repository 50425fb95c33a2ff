#!/usr/bin/env python3
"""Health-check providers through a running LLM Keyring service.

Usage:
  python scripts/check_providers.py --base-url http://127.0.0.1:8787
  python scripts/check_providers.py --provider-id <uuid> --models

Environment fallbacks:
  LLMKEYRING_BASE_URL
"""
from __future__ import annotations

import argparse
import os
import sys
from typing import Any

import httpx


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="LLM Keyring provider check")
    parser.add_argument("--base-url", default=os.getenv("LLMKEYRING_BASE_URL", "http://127.0.0.1:8787"))
    parser.add_argument("--provider-id", help="Only test this provider")
    parser.add_argument("--models", action="store_true", help="Also list models")
    parser.add_argument("--include-disabled", action="store_true")
    parser.add_argument("--timeout", type=float, default=30.0)
    return parser.parse_args()


def exit_with(message: str, code: int = 1) -> None:
    print(message, file=sys.stderr)
    raise SystemExit(code)


def safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


def format_line(provider: dict[str, Any]) -> str:
    last = provider.get("lastTest") or {}
    message = (last.get("message") or "").replace("\n", " ")
    return f"{last.get('status', 'unknown'):<8} {provider.get('name', '?')}  {message}".rstrip()


def check(client: httpx.Client, provider: dict[str, Any], with_models: bool) -> bool:
    response = client.post(f"/providers/{provider['id']}/test")
    if response.status_code != 200:
        print(f"error    {provider.get('name', '?')}  HTTP {response.status_code} {response.text}")
        return False
    tested = safe_json(response)
    print(format_line(tested))

    if with_models:
        models = safe_json(client.get(f"/providers/{provider['id']}/models"))
        if models.get("error"):
            print(f"         models: {models['error']}")
        else:
            print(f"         models: {', '.join(models.get('models', []))}")
    return tested.get("lastTest", {}).get("status") == "success"


def main() -> None:
    args = parse_args()
    client = httpx.Client(base_url=args.base_url.rstrip("/"), timeout=args.timeout)

    try:
        if args.provider_id:
            response = client.get(f"/providers/{args.provider_id}")
            providers = [safe_json(response)] if response.status_code == 200 else []
        else:
            response = client.get("/providers")
            providers = safe_json(response) if response.status_code == 200 else []
        if response.status_code != 200:
            exit_with(f"Could not load providers: HTTP {response.status_code} {response.text}")

        if not args.include_disabled:
            providers = [p for p in providers if p.get("enabled", True)]

        results = [check(client, provider, args.models) for provider in providers]
    except httpx.HTTPError as exc:
        exit_with(f"Request failed: {exc}")
    finally:
        client.close()

    if not all(results):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
