"""Commands the host invokes; each call is independent of the others."""

from __future__ import annotations

import logging

from . import github
from .analysis import AnalysisRequest, run_analysis
from .analysis.llm import LLM
from .contracts import PRDetails
from .dispatch import DispatchContext, TerminalLauncher, create_launcher, render_command
from .store import TrackedPRStore

LOGGER = logging.getLogger(__name__)


async def analyze_failure(
    logs: str,
    job_name: str,
    api_key: str,
    *,
    llm: LLM | None = None,
    timeout: float | None = None,
) -> str:
    """Return a plain-text diagnosis of the failed job ``job_name``.

    Raises :class:`~prtracker.errors.AnalysisError` subclasses on failure.
    """

    request = AnalysisRequest(job_name=job_name, raw_log=logs, api_key=api_key)
    return await run_analysis(request, llm=llm, timeout=timeout)


def open_cli(
    command_template: str,
    context: str,
    repo: str,
    number: int,
    pr_url: str,
    *,
    launcher: TerminalLauncher | None = None,
) -> None:
    """Open a terminal running ``command_template`` filled in for the PR.

    Returns once the terminal automation process has been spawned. Raises
    :class:`~prtracker.errors.DispatchError` subclasses on failure.
    """

    command = render_command(
        DispatchContext(
            command_template=command_template,
            freeform_context=context,
            repo=repo,
            pr_number=number,
            pr_url=pr_url,
        )
    )
    launcher = launcher or create_launcher()
    launcher.launch(command)
    LOGGER.info("opened CLI for %s#%d", repo, number)


def fetch_pr_info(repo: str, number: int, token: str = "") -> PRDetails:
    return github.fetch_pr_info(repo, number, token)


def fetch_tracked_prs(store: TrackedPRStore, token: str = "") -> list[PRDetails]:
    """Return details for every tracked PR, in the order they were added."""

    return [
        github.fetch_pr_info(record.repo, record.number, token)
        for record in store.list_all()
    ]


def add_tracked_pr(store: TrackedPRStore, repo: str, number: int) -> None:
    store.add(repo, number)


def remove_tracked_pr(store: TrackedPRStore, repo: str, number: int) -> None:
    store.remove(repo, number)


def debug_log(message: str) -> None:
    """Record a diagnostic message sent by the host UI."""

    LOGGER.debug("[host] %s", message)


__all__ = [
    "add_tracked_pr",
    "analyze_failure",
    "debug_log",
    "fetch_pr_info",
    "fetch_tracked_prs",
    "open_cli",
    "remove_tracked_pr",
]
