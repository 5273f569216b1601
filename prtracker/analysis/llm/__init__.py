"""LLM adapter implementations and factory."""

from __future__ import annotations

import os

from .base import LLM
from .minimax import MiniMax
from .mock import MockLLM


def create_llm(api_key: str, backend: str | None = None) -> LLM:
    """Return an ``LLM`` instance based on ``backend`` or environment.

    The MiniMax backend is the default and rejects a blank ``api_key``.
    The ``MOCK`` backend ignores ``api_key``, so a blank key is accepted.
    """

    if backend is None:
        backend = os.getenv("PRTRACKER_LLM_BACKEND", "MINIMAX")
    backend = backend.upper()
    if backend == "MOCK":
        return MockLLM()
    return MiniMax(api_key)


__all__ = ["LLM", "MiniMax", "MockLLM", "create_llm"]
