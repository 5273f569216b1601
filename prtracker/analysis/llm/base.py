"""Base protocol for analysis model adapters."""

from __future__ import annotations

from typing import Protocol


class LLM(Protocol):
    """Interface for large language models."""

    def generate(self, prompt: str, *, timeout: float | None = None) -> str:
        """Return the answer text for ``prompt``.

        ``timeout`` is handed to the transport; ``None`` waits indefinitely.
        """


__all__ = ["LLM"]
