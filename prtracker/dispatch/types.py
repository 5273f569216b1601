"""Typed structures for the command dispatch pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class DispatchContext:
    """Everything needed to open a CLI session for one pull request."""

    command_template: str
    freeform_context: str
    repo: str
    pr_number: int
    pr_url: str


__all__ = ["DispatchContext"]
