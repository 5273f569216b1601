"""MiniMax adapter speaking the Anthropic-compatible messages API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from ...errors import HttpError, MissingCredential, RequestFailed
from ...redact import redact
from ..extract import extract_text
from .base import LLM

LOGGER = logging.getLogger(__name__)

_API_URL = "https://api.minimaxi.com/anthropic/v1/messages"
_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MODEL = "MiniMax-M2.5-highspeed"
MAX_TOKENS = 2048


class MiniMax(LLM):
    """LLM adapter posting a single user message to MiniMax."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL) -> None:
        api_key = (api_key or "").strip()
        if not api_key:
            raise MissingCredential()
        self._api_key = api_key
        self.model = model

    def __repr__(self) -> str:
        return f"MiniMax(model={self.model!r})"

    def _headers(self) -> dict[str, str]:
        # Key goes out twice: some gateways read x-api-key, others Bearer auth.
        return {
            "x-api-key": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "anthropic-version": _ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def generate(self, prompt: str, *, timeout: float | None = None) -> str:
        headers = self._headers()
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }
        LOGGER.debug("POST %s headers=%s", _API_URL, redact(headers))
        try:
            resp = requests.post(
                _API_URL, headers=headers, json=payload, timeout=timeout
            )
        except requests.RequestException as exc:
            raise RequestFailed(str(exc)) from exc
        body = resp.text
        if not resp.ok:
            raise HttpError(resp.status_code, body[:500])
        LOGGER.debug("analysis response: %d byte(s)", len(body))
        return extract_text(body)


__all__ = ["DEFAULT_MODEL", "MAX_TOKENS", "MiniMax"]
