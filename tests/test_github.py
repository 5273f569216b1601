from datetime import UTC, datetime
from typing import Any

import pytest
import requests

from prtracker import github
from prtracker.contracts import CIJob
from prtracker.errors import GitHubError

PR = {
    "id": 99,
    "number": 5,
    "title": "Fix things",
    "state": "open",
    "merged_at": None,
    "html_url": "https://github.com/a/b/pull/5",
    "user": {"login": "octo"},
    "head": {"sha": "deadbeef"},
    "additions": 3,
    "deletions": 1,
    "updated_at": "2024-01-01T10:00:00Z",
}

ACTIONS_URL = "https://github.com/a/b/actions/runs/111/job/222"


class DummyResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, text: str = ""):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self.payload is None:
            raise ValueError("no json")
        return self.payload


def _fake_get(routes: dict[str, DummyResponse], seen: list[str] | None = None):
    def fake_get(url: str, **kwargs: Any) -> DummyResponse:
        if seen is not None:
            seen.append(url)
        for suffix, resp in routes.items():
            if url.endswith(suffix):
                return resp
        raise AssertionError(f"unexpected url {url}")

    return fake_get


def _check(name: str, status: str, conclusion: str | None, **extra: Any) -> dict:
    return {"id": len(name), "name": name, "status": status, "conclusion": conclusion, **extra}


def test_fetch_pr_info_without_token_is_synthetic(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get({}))
    details = github.fetch_pr_info("a/b", 5)
    assert details.pr.title == "PR #5 from a/b"
    assert details.pr.html_url == "https://github.com/a/b/pull/5"
    assert details.pr.state == "open"
    assert details.check_runs == []


def test_fetch_pr_info(monkeypatch: pytest.MonkeyPatch) -> None:
    routes = {
        "/pulls/5": DummyResponse(PR),
        "/commits/deadbeef/check-runs": DummyResponse(
            {"check_runs": [_check("build", "completed", "failure")]}
        ),
    }
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    details = github.fetch_pr_info("a/b", 5, "tok")
    assert details.pr.id == 99
    assert details.pr.head_sha == "deadbeef"
    assert [(c.name, c.conclusion) for c in details.check_runs] == [("build", "failure")]


def test_fetch_pr_data(monkeypatch: pytest.MonkeyPatch) -> None:
    runs = [
        _check("lint", "completed", "success"),
        _check("tests", "completed", "failure", details_url=ACTIONS_URL),
    ]
    routes = {
        "/pulls/5": DummyResponse({**PR, "merged_at": "2024-01-01T09:00:00Z"}),
        "/check-runs": DummyResponse({"check_runs": runs}),
    }
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    now = datetime(2024, 1, 1, 13, 0, tzinfo=UTC)
    data = github.fetch_pr_data("a/b", 5, "tok", now=now)
    assert data.state == "merged"
    assert data.author == "octo"
    assert data.last_updated == "3h ago"
    assert data.ci_status == "failure"
    assert data.ci_jobs[1].job_id == 222
    assert data.ci_jobs[0].job_id is None


def test_api_error_uses_message(monkeypatch: pytest.MonkeyPatch) -> None:
    routes = {"/pulls/5": DummyResponse({"message": "Not Found"}, status_code=404)}
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    with pytest.raises(GitHubError, match="Not Found"):
        github.fetch_pr_info("a/b", 5, "tok")


def test_api_error_without_json(monkeypatch: pytest.MonkeyPatch) -> None:
    routes = {"/pulls/5": DummyResponse(None, status_code=500)}
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    with pytest.raises(GitHubError, match="HTTP 500"):
        github.fetch_pr_info("a/b", 5, "tok")


def test_invalid_repo() -> None:
    with pytest.raises(GitHubError):
        github.fetch_job_logs("not-a-repo", 1, "tok")


def test_fetch_job_logs_strips_ansi_and_keeps_tail(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    lines = [f"\x1b[32mline {i}\x1b[0m" for i in range(400)]
    routes = {"/jobs/7/logs": DummyResponse(text="\n".join(lines))}
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    out = github.fetch_job_logs("a/b", 7, "tok").split("\n")
    assert len(out) == github.LOG_TAIL_LINES
    assert out[0] == "line 100"
    assert out[-1] == "line 399"


def test_failed_run_ids_from_check_runs(monkeypatch: pytest.MonkeyPatch) -> None:
    actions = {"name": "GitHub Actions"}
    runs = [
        _check("a", "completed", "failure", app=actions, details_url=ACTIONS_URL),
        _check("bb", "completed", "timed_out", app=actions, details_url=ACTIONS_URL),
        _check("ccc", "completed", "success", app=actions,
               details_url="https://github.com/a/b/actions/runs/333/job/1"),
        _check("dddd", "completed", "failure", app={"name": "Other"},
               details_url="https://ci.example/actions/runs/444"),
    ]
    routes = {
        "/pulls/5": DummyResponse(PR),
        "/check-runs": DummyResponse({"check_runs": runs}),
    }
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    assert github.get_failed_workflow_run_ids("a/b", 5, "tok") == [111]


def test_failed_run_ids_fall_back_to_workflow_runs(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    routes = {
        "/pulls/5": DummyResponse(PR),
        "/check-runs": DummyResponse({"check_runs": []}),
        "/actions/runs": DummyResponse(
            {"workflow_runs": [
                {"id": 1, "conclusion": "success"},
                {"id": 2, "conclusion": "cancelled"},
            ]}
        ),
    }
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    assert github.get_failed_workflow_run_ids("a/b", 5, "tok") == [2]


def test_failed_run_ids_swallow_api_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get(url: str, **kwargs: Any) -> DummyResponse:
        raise requests.ConnectionError("down")

    monkeypatch.setattr("prtracker.github.requests.get", fake_get)
    assert github.get_failed_workflow_run_ids("a/b", 5, "tok") == []
    assert github.get_workflow_run_id("a/b", 5, "tok") is None


def test_workflow_run_id_prefers_failed_run(monkeypatch: pytest.MonkeyPatch) -> None:
    routes = {
        "/pulls/5": DummyResponse(PR),
        "/check-runs": DummyResponse({"check_runs": []}),
        "/actions/runs": DummyResponse(
            {"workflow_runs": [
                {"id": 1, "conclusion": "success"},
                {"id": 2, "conclusion": "failure"},
            ]}
        ),
    }
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    assert github.get_workflow_run_id("a/b", 5, "tok") == 2


def test_rerun_failed_jobs(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[str] = []

    def fake_post(url: str, **kwargs: Any) -> DummyResponse:
        seen.append(url)
        return DummyResponse(status_code=201)

    monkeypatch.setattr("prtracker.github.requests.post", fake_post)
    github.rerun_failed_jobs("a/b", 111, "tok")
    assert seen == [f"{github.API_BASE}/repos/a/b/actions/runs/111/rerun-failed-jobs"]


def test_rerun_already_running(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "prtracker.github.requests.post",
        lambda url, **kw: DummyResponse(status_code=403, text="This workflow is already running"),
    )
    with pytest.raises(GitHubError, match="still in progress"):
        github.rerun_failed_jobs("a/b", 111, "tok")


def test_map_job_status() -> None:
    assert github.map_job_status({"status": "queued"}) == "running"
    assert github.map_job_status({"status": "in_progress"}) == "running"
    assert github.map_job_status({"status": "completed", "conclusion": "neutral"}) == "success"
    assert github.map_job_status({"status": "completed", "conclusion": "timed_out"}) == "failure"
    assert github.map_job_status({"status": "completed", "conclusion": "cancelled"}) == "skipped"


def test_derive_ci_status() -> None:
    assert github.derive_ci_status([]) == "pending"
    jobs = [CIJob(name="a", status="success"), CIJob(name="b", status="failure")]
    assert github.derive_ci_status(jobs) == "failure"
    jobs.append(CIJob(name="c", status="running"))
    assert github.derive_ci_status(jobs) == "running"
    assert github.derive_ci_status([CIJob(name="a", status="skipped")]) == "success"


def test_format_time_ago() -> None:
    now = datetime(2024, 1, 10, 12, 0, 0, tzinfo=UTC)
    assert github.format_time_ago("2024-01-10T11:59:30Z", now=now) == "30s ago"
    assert github.format_time_ago("2024-01-10T11:15:00Z", now=now) == "45m ago"
    assert github.format_time_ago("2024-01-10T02:00:00+00:00", now=now) == "10h ago"
    assert github.format_time_ago("2024-01-07T12:00:00Z", now=now) == "3d ago"


def test_extract_ids() -> None:
    assert github.extract_job_id(ACTIONS_URL) == 222
    assert github.extract_run_id(ACTIONS_URL) == 111
    assert github.extract_run_id("https://github.com/a/b/actions/runs/5?pr=1") == 5
    assert github.extract_run_id("https://example.com/checks") is None


def test_connection_error_becomes_github_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def fake_get(url: str, **kwargs: Any) -> DummyResponse:
        raise requests.ConnectionError("dns failure")

    monkeypatch.setattr("prtracker.github.requests.get", fake_get)
    with pytest.raises(GitHubError, match="dns failure"):
        github.fetch_pr_info("a/b", 5, "tok")
    with pytest.raises(GitHubError, match="dns failure"):
        github.fetch_pr_data("a/b", 5, "tok")
    with pytest.raises(GitHubError, match="dns failure"):
        github.fetch_job_logs("a/b", 7, "tok")


def test_rerun_connection_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, **kwargs: Any) -> DummyResponse:
        raise requests.Timeout("timed out")

    monkeypatch.setattr("prtracker.github.requests.post", fake_post)
    with pytest.raises(GitHubError, match="timed out"):
        github.rerun_failed_jobs("a/b", 111, "tok")


def test_non_json_success_body(monkeypatch: pytest.MonkeyPatch) -> None:
    routes = {"/pulls/5": DummyResponse(None, text="<html>")}
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    with pytest.raises(GitHubError, match="not valid JSON"):
        github.fetch_pr_info("a/b", 5, "tok")


def test_list_payload_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    routes = {
        "/pulls/5": DummyResponse(PR),
        "/check-runs": DummyResponse([{"id": 1}]),
    }
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    with pytest.raises(GitHubError, match="expected a JSON object"):
        github.fetch_pr_data("a/b", 5, "tok")


def test_missing_pull_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    pr = {key: value for key, value in PR.items() if key != "head"}
    routes = {"/pulls/5": DummyResponse(pr)}
    monkeypatch.setattr("prtracker.github.requests.get", _fake_get(routes))
    with pytest.raises(GitHubError, match="unexpected response shape"):
        github.fetch_pr_info("a/b", 5, "tok")
    with pytest.raises(GitHubError, match="unexpected response shape"):
        github.fetch_pr_data("a/b", 5, "tok")
