"""Diagnose failed CI jobs and hand remediation to a terminal CLI agent."""

from .commands import analyze_failure, open_cli

__all__ = ["analyze_failure", "open_cli"]
