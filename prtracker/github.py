"""GitHub REST client for pull requests, check runs and Actions jobs."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import requests

from .contracts import CheckRun, CIJob, FetchedPRData, PRDetails, PRInfo
from .contracts.github import CIStatus, JobStatus
from .errors import GitHubError

LOGGER = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
_API_VERSION = "2022-11-28"
_TIMEOUT = 30.0
LOG_TAIL_LINES = 300

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[mGKHFABCDJn]")
_JOB_ID_RE = re.compile(r"/job/(\d+)")
_RUN_ID_RE = re.compile(r"/actions/runs/(\d+)(?:/job/\d+)?(?:[/?]|$)")
_FAILED_CONCLUSIONS = {"failure", "timed_out", "cancelled", "action_required"}


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": _API_VERSION,
        "Accept": "application/vnd.github+json",
    }


def _split_repo(repo: str) -> tuple[str, str]:
    owner, _, name = repo.strip().partition("/")
    if not owner or not name or "/" in name:
        raise GitHubError(f"repository must look like owner/name, got {repo!r}")
    return owner, name


def _error_message(resp: requests.Response) -> str:
    """Return GitHub's ``message`` field or ``HTTP <status>``."""

    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return f"HTTP {resp.status_code}"


def _get_json(
    url: str, token: str, params: dict[str, Any] | None = None
) -> dict[str, Any]:
    LOGGER.debug("GET %s params=%s", url, params)
    try:
        resp = requests.get(
            url, headers=_headers(token), params=params, timeout=_TIMEOUT
        )
    except requests.RequestException as exc:
        raise GitHubError(f"request failed: {exc}") from exc
    if not resp.ok:
        raise GitHubError(_error_message(resp))
    try:
        data = resp.json()
    except ValueError as exc:
        raise GitHubError(f"response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise GitHubError(f"expected a JSON object from {url}")
    return data


def _unexpected_shape(exc: Exception) -> GitHubError:
    return GitHubError(f"unexpected response shape: {exc!r}")


def _get_pull(repo: str, number: int, token: str) -> dict[str, Any]:
    owner, name = _split_repo(repo)
    return _get_json(f"{API_BASE}/repos/{owner}/{name}/pulls/{number}", token)


def _get_check_runs(repo: str, sha: str, token: str) -> list[dict[str, Any]]:
    owner, name = _split_repo(repo)
    data = _get_json(
        f"{API_BASE}/repos/{owner}/{name}/commits/{sha}/check-runs",
        token,
        params={"per_page": 100},
    )
    return list(data.get("check_runs") or [])


def _get_workflow_runs(
    repo: str, sha: str, token: str, *, per_page: int
) -> list[dict[str, Any]]:
    owner, name = _split_repo(repo)
    data = _get_json(
        f"{API_BASE}/repos/{owner}/{name}/actions/runs",
        token,
        params={"head_sha": sha, "per_page": per_page},
    )
    return list(data.get("workflow_runs") or [])


def extract_job_id(details_url: str) -> int | None:
    """Return the Actions job id embedded in a check run ``details_url``."""

    match = _JOB_ID_RE.search(details_url)
    return int(match.group(1)) if match else None


def extract_run_id(details_url: str) -> int | None:
    """Return the workflow run id embedded in a check run ``details_url``."""

    match = _RUN_ID_RE.search(details_url)
    return int(match.group(1)) if match else None


def is_failed_conclusion(conclusion: str | None) -> bool:
    return (conclusion or "") in _FAILED_CONCLUSIONS


def map_job_status(check: dict[str, Any]) -> JobStatus:
    """Collapse a check run's status and conclusion into a job status."""

    if check.get("status") in {"queued", "in_progress"}:
        return "running"
    conclusion = check.get("conclusion")
    if conclusion in {"success", "neutral"}:
        return "success"
    if conclusion in {"failure", "timed_out"}:
        return "failure"
    return "skipped"


def derive_ci_status(jobs: Iterable[CIJob]) -> CIStatus:
    """Return the overall CI status for ``jobs``."""

    statuses = [job.status for job in jobs]
    if not statuses:
        return "pending"
    if "running" in statuses:
        return "running"
    if "failure" in statuses:
        return "failure"
    return "success"


def format_time_ago(iso_string: str, *, now: datetime | None = None) -> str:
    """Return ``iso_string`` as a short relative time such as ``3h ago``."""

    then = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    if then.tzinfo is None:
        then = then.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    seconds = int((now - then).total_seconds())
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def fetch_pr_info(repo: str, number: int, token: str = "") -> PRDetails:
    """Return the pull request and its check runs.

    Without a token a synthetic record is returned so the tracker still
    renders something for the PR.
    """

    if not token.strip():
        LOGGER.debug("no GitHub token; returning placeholder for %s#%d", repo, number)
        return PRDetails(
            pr=PRInfo(
                id=number,
                number=number,
                title=f"PR #{number} from {repo}",
                state="open",
                html_url=f"https://github.com/{repo}/pull/{number}",
                head_sha="abc123",
            ),
            check_runs=[],
        )
    pr = _get_pull(repo, number, token)
    try:
        head_sha = pr["head"]["sha"]
        runs = _get_check_runs(repo, head_sha, token)
        return PRDetails(
            pr=PRInfo(
                id=pr["id"],
                number=pr["number"],
                title=pr["title"],
                state=pr["state"],
                html_url=pr["html_url"],
                head_sha=head_sha,
            ),
            check_runs=[
                CheckRun(
                    id=run["id"],
                    name=run["name"],
                    status=run["status"],
                    conclusion=run.get("conclusion"),
                )
                for run in runs
            ],
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise _unexpected_shape(exc) from exc


def fetch_pr_data(
    repo: str, number: int, token: str, *, now: datetime | None = None
) -> FetchedPRData:
    """Return the summarised state of a pull request and its CI jobs."""

    pr = _get_pull(repo, number, token)
    try:
        runs = _get_check_runs(repo, pr["head"]["sha"], token)
        jobs = [
            CIJob(
                name=run["name"],
                status=map_job_status(run),
                job_id=(
                    extract_job_id(run["details_url"])
                    if run.get("details_url")
                    else None
                ),
            )
            for run in runs
        ]
        state = "merged" if pr.get("merged_at") is not None else pr["state"]
        return FetchedPRData(
            title=pr["title"],
            author=pr["user"]["login"],
            state=state,
            additions=pr.get("additions", 0),
            deletions=pr.get("deletions", 0),
            last_updated=format_time_ago(pr["updated_at"], now=now),
            ci_status=derive_ci_status(jobs),
            ci_jobs=jobs,
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise _unexpected_shape(exc) from exc


def fetch_job_logs(repo: str, job_id: int, token: str) -> str:
    """Return the last lines of an Actions job log with ANSI escapes removed."""

    owner, name = _split_repo(repo)
    url = f"{API_BASE}/repos/{owner}/{name}/actions/jobs/{job_id}/logs"
    LOGGER.debug("GET %s", url)
    try:
        resp = requests.get(
            url,
            headers={
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": _API_VERSION,
            },
            timeout=_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise GitHubError(f"request failed: {exc}") from exc
    if not resp.ok:
        raise GitHubError(f"HTTP {resp.status_code}")
    clean = _ANSI_RE.sub("", resp.text)
    return "\n".join(clean.split("\n")[-LOG_TAIL_LINES:])


def get_failed_workflow_run_ids(repo: str, number: int, token: str) -> list[int]:
    """Return ids of failed workflow runs for the PR head, or ``[]``."""

    try:
        head_sha = (_get_pull(repo, number, token).get("head") or {}).get("sha")
        if not head_sha:
            return []
        run_ids: list[int] = []
        for run in _get_check_runs(repo, head_sha, token):
            app = run.get("app") or {}
            if app.get("name") != "GitHub Actions" or not run.get("details_url"):
                continue
            if not is_failed_conclusion(run.get("conclusion")):
                continue
            run_id = extract_run_id(run["details_url"])
            if run_id and run_id not in run_ids:
                run_ids.append(run_id)
        if run_ids:
            return run_ids
        for run in _get_workflow_runs(repo, head_sha, token, per_page=50):
            if is_failed_conclusion(run.get("conclusion")) and run["id"] not in run_ids:
                run_ids.append(run["id"])
        return run_ids
    except (GitHubError, KeyError, TypeError, AttributeError) as exc:
        LOGGER.warning("could not list failed runs for %s#%d: %s", repo, number, exc)
        return []


def get_workflow_run_id(repo: str, number: int, token: str) -> int | None:
    """Return the workflow run to act on for the PR head, or ``None``."""

    try:
        head_sha = (_get_pull(repo, number, token).get("head") or {}).get("sha")
        if not head_sha:
            return None
        for run in _get_check_runs(repo, head_sha, token):
            app = run.get("app") or {}
            if app.get("name") == "GitHub Actions" and run.get("details_url"):
                run_id = extract_run_id(run["details_url"])
                if run_id:
                    return run_id
        runs = _get_workflow_runs(repo, head_sha, token, per_page=20)
        if not runs:
            return None
        for run in runs:
            if is_failed_conclusion(run.get("conclusion")):
                return run["id"]
        return runs[0]["id"]
    except (GitHubError, KeyError, TypeError, AttributeError) as exc:
        LOGGER.warning("could not find workflow run for %s#%d: %s", repo, number, exc)
        return None


def rerun_failed_jobs(repo: str, run_id: int, token: str) -> None:
    """Ask GitHub to rerun the failed jobs of workflow run ``run_id``."""

    owner, name = _split_repo(repo)
    url = f"{API_BASE}/repos/{owner}/{name}/actions/runs/{run_id}/rerun-failed-jobs"
    LOGGER.info("requesting rerun of failed jobs in run %d", run_id)
    try:
        resp = requests.post(url, headers=_headers(token), timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise GitHubError(f"request failed: {exc}") from exc
    if resp.ok:
        return
    if resp.status_code == 403 and "already running" in resp.text:
        raise GitHubError("workflow run is still in progress; cannot rerun it yet")
    raise GitHubError(f"HTTP {resp.status_code}: {resp.text}")


__all__ = [
    "API_BASE",
    "derive_ci_status",
    "extract_job_id",
    "extract_run_id",
    "fetch_job_logs",
    "fetch_pr_data",
    "fetch_pr_info",
    "format_time_ago",
    "get_failed_workflow_run_ids",
    "get_workflow_run_id",
    "map_job_status",
    "rerun_failed_jobs",
]
