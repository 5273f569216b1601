"""Pydantic contracts for data exchanged with the host."""

from .github import CheckRun, CIJob, FetchedPRData, PRDetails, PRInfo

__all__ = ["CIJob", "CheckRun", "FetchedPRData", "PRDetails", "PRInfo"]
