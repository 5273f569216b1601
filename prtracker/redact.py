"""Utilities for keeping API keys and tokens out of log records."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

DEFAULT_SECRET_KEYS = {
    "token",
    "access_token",
    "api_key",
    "x-api-key",
    "authorization",
    "password",
    "github_token",
    "minimax_api_key",
}

TOKEN_PATTERNS = [
    re.compile(r"(?i)\bbearer\s+\S+"),
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}"),
    re.compile(r"[A-Za-z0-9_-]{32,}"),
]


def _redact_str(value: str) -> str:
    redacted = value
    for pattern in TOKEN_PATTERNS:
        redacted = pattern.sub("[redacted]", redacted)
    return redacted


def redact(data: Any, secret_keys: Iterable[str] = ()) -> Any:
    """Recursively redact secrets from ``data``.

    Mapping keys are compared case-insensitively so HTTP header names match.
    """
    secrets = {k.lower() for k in DEFAULT_SECRET_KEYS.union(secret_keys)}
    if isinstance(data, dict):
        result: dict[Any, Any] = {}
        for key, value in data.items():
            if isinstance(key, str) and key.lower() in secrets:
                result[key] = "[redacted]"
            else:
                result[key] = redact(value, secrets)
        return result
    if isinstance(data, list):
        return [redact(item, secrets) for item in data]
    if isinstance(data, str):
        return _redact_str(data)
    return data


__all__ = ["DEFAULT_SECRET_KEYS", "redact"]
