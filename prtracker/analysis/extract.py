"""Extract the answer text from analysis endpoint responses.

Providers behind the same Anthropic-compatible endpoint disagree on the body
shape, so extraction tries each known shape in order and stops at the first
one that yields a string.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from ..errors import MalformedResponse, UnexpectedShape

Extractor = Callable[[Any], str | None]


def _content_list(data: Any) -> list[Any] | None:
    if not isinstance(data, dict):
        return None
    content = data.get("content")
    if isinstance(content, list):
        return content
    return None


def _tagged_text(data: Any) -> str | None:
    """``{"content": [{"type": "thinking", ...}, {"type": "text", "text": ...}]}``"""

    for item in _content_list(data) or []:
        if not isinstance(item, dict) or item.get("type") != "text":
            continue
        text = item.get("text")
        if isinstance(text, str):
            return text
    return None


def _first_content_text(data: Any) -> str | None:
    """``{"content": [{"text": ...}]}``"""

    content = _content_list(data)
    if not content or not isinstance(content[0], dict):
        return None
    text = content[0].get("text")
    return text if isinstance(text, str) else None


def _choice_message(data: Any) -> str | None:
    """``{"choices": [{"message": {"content": ...}}]}``"""

    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


EXTRACTORS: tuple[Extractor, ...] = (
    _tagged_text,
    _first_content_text,
    _choice_message,
)


def extract_text(body: str) -> str:
    """Return the diagnosis text carried by the raw response ``body``."""

    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(str(exc), body[:200]) from exc
    for extractor in EXTRACTORS:
        text = extractor(data)
        if text is not None:
            return text
    raise UnexpectedShape(json.dumps(data, separators=(",", ":"), ensure_ascii=False))


__all__ = ["EXTRACTORS", "extract_text"]
