"""Typed structures for the failure-analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class AnalysisRequest:
    """A single request to diagnose a failed CI job."""

    job_name: str
    raw_log: str
    api_key: str = field(repr=False)


@dataclass(slots=True, frozen=True)
class Prompt:
    """Prompt text sent to the analysis model."""

    text: str
    job_name: str


__all__ = ["AnalysisRequest", "Prompt"]
