"""Command-line host for the PR tracker core."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from . import commands, github
from .errors import AnalysisError, DispatchError, GitHubError, StoreError
from .settings import (
    TRACKED_FILE,
    home_dir,
    load_settings,
    resolve_api_key,
    resolve_github_token,
)
from .store import TrackedPRStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prtracker",
        description="Diagnose failed CI jobs and hand them to a CLI agent.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="diagnose a failed job log")
    analyze.add_argument("--job", required=True, help="name of the CI job")
    analyze.add_argument("--log", type=Path, help="log file (default: stdin)")
    analyze.add_argument("--timeout", type=float, default=None)

    open_cli = sub.add_parser("open-cli", help="open a terminal running a CLI agent")
    open_cli.add_argument("--repo", required=True)
    open_cli.add_argument("--number", type=int, required=True)
    open_cli.add_argument("--url", default=None, help="PR URL (derived if omitted)")
    open_cli.add_argument("--context", default="", help="free-text context")
    group = open_cli.add_mutually_exclusive_group()
    group.add_argument("--template", help="command template overriding settings")
    group.add_argument(
        "--secondary", action="store_true", help="use the secondary CLI template"
    )

    pr = sub.add_parser("pr", help="show a pull request and its CI")
    pr.add_argument("repo")
    pr.add_argument("number", type=int)

    logs = sub.add_parser("logs", help="print the tail of an Actions job log")
    logs.add_argument("repo")
    logs.add_argument("job_id", type=int)

    rerun = sub.add_parser("rerun", help="rerun failed jobs of a PR's workflow")
    rerun.add_argument("repo")
    rerun.add_argument("number", type=int)

    track = sub.add_parser("track", help="manage tracked pull requests")
    track_sub = track.add_subparsers(dest="action", required=True)
    for action in ("add", "remove"):
        p = track_sub.add_parser(action)
        p.add_argument("repo")
        p.add_argument("number", type=int)
    track_sub.add_parser("list")
    return parser


def _run(args: argparse.Namespace) -> int:
    settings = load_settings()
    token = resolve_github_token(settings)

    if args.command == "analyze":
        if args.log is None:
            logs = sys.stdin.read()
        else:
            try:
                logs = args.log.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                print(f"error: cannot read {args.log}: {exc.strerror}", file=sys.stderr)
                return 1
        text = asyncio.run(
            commands.analyze_failure(
                logs, args.job, resolve_api_key(settings), timeout=args.timeout
            )
        )
        print(text)
    elif args.command == "open-cli":
        if args.template is not None:
            template = args.template
        elif args.secondary:
            template = settings.secondary_cli_template
        else:
            template = settings.primary_cli_template
        url = args.url or f"https://github.com/{args.repo}/pull/{args.number}"
        commands.open_cli(template, args.context, args.repo, args.number, url)
    elif args.command == "pr":
        if token:
            data = github.fetch_pr_data(args.repo, args.number, token)
            run_id = github.get_workflow_run_id(args.repo, args.number, token)
            data = data.model_copy(update={"run_id": run_id})
        else:
            data = commands.fetch_pr_info(args.repo, args.number)
        print(data.model_dump_json(indent=2))
    elif args.command == "logs":
        print(github.fetch_job_logs(args.repo, args.job_id, token))
    elif args.command == "rerun":
        run_ids = github.get_failed_workflow_run_ids(args.repo, args.number, token)
        if not run_ids:
            print("no failed workflow runs found", file=sys.stderr)
            return 1
        for run_id in run_ids:
            github.rerun_failed_jobs(args.repo, run_id, token)
            print(f"rerun requested for workflow run {run_id}")
    elif args.command == "track":
        store = TrackedPRStore(home_dir() / TRACKED_FILE)
        if args.action == "add":
            commands.add_tracked_pr(store, args.repo, args.number)
        elif args.action == "remove":
            commands.remove_tracked_pr(store, args.repo, args.number)
        else:
            details = commands.fetch_tracked_prs(store, token)
            print(json.dumps([d.model_dump() for d in details], indent=2))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse ``argv``, run the command and return the exit status."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
    args = _build_parser().parse_args(argv)
    try:
        return _run(args)
    except (AnalysisError, DispatchError, GitHubError, StoreError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual entry
    sys.exit(main())
