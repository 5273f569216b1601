"""Pull request and CI shapes handed to the host."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

CIStatus = Literal["success", "failure", "pending", "running"]
JobStatus = Literal["success", "failure", "running", "skipped", "pending"]


class PRInfo(BaseModel):
    """Core metadata of a pull request."""

    id: int = Field(..., description="GitHub identifier of the pull request")
    number: int = Field(..., description="Pull request number within the repo")
    title: str
    state: str = Field(..., description="open or closed")
    html_url: str = Field(..., description="Browser URL of the pull request")
    head_sha: str = Field(..., description="Commit SHA at the head of the branch")


class CheckRun(BaseModel):
    """A check run reported against the head commit."""

    id: int
    name: str
    status: str = Field(..., description="queued, in_progress or completed")
    conclusion: str | None = Field(
        None, description="Outcome once the run has completed"
    )


class PRDetails(BaseModel):
    """A pull request together with its check runs."""

    pr: PRInfo
    check_runs: list[CheckRun] = Field(default_factory=list)


class CIJob(BaseModel):
    """Summarised status of one CI job."""

    name: str
    status: JobStatus
    job_id: int | None = Field(None, description="Actions job id, if known")


class FetchedPRData(BaseModel):
    """Pull request summary with derived CI status."""

    title: str
    author: str
    state: Literal["open", "merged", "closed"]
    additions: int
    deletions: int
    last_updated: str = Field(..., description="Relative time such as '5m ago'")
    ci_status: CIStatus
    ci_jobs: list[CIJob] = Field(default_factory=list)
    run_id: int | None = Field(
        None, description="Workflow run to rerun or inspect, if one was found"
    )


__all__ = [
    "CIJob",
    "CIStatus",
    "CheckRun",
    "FetchedPRData",
    "JobStatus",
    "PRDetails",
    "PRInfo",
]
