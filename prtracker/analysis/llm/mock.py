"""Deterministic mock LLM for tests and offline use."""

from __future__ import annotations

from .base import LLM

_RESPONSE = """\
[Failure type]
test failure

[Root cause]
Mock diagnosis: the job failed because a test assertion did not hold.

[Error details]
Error message: mock assertion failed
Location: tests/test_mock.py:1

[Fix suggestions]
1. Re-run the failing test locally.
2. Inspect the assertion and the code under test.
"""


class MockLLM(LLM):
    """LLM returning a canned diagnosis regardless of input."""

    def __init__(self, response: str = _RESPONSE) -> None:
        self.response = response
        self.prompts: list[str] = []

    def generate(self, prompt: str, *, timeout: float | None = None) -> str:  # noqa: D401
        """Return the canned diagnosis, recording ``prompt``."""

        self.prompts.append(prompt)
        return self.response


__all__ = ["MockLLM"]
