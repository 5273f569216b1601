"""Compose the text handed to a CLI agent for a failing PR."""

from __future__ import annotations

SKILL_NAME = "ci-failure-analyzer"

_PREAMBLE = """\
Use skill:{skill} to analyze the following CI failure.

Repository: {repo}
PR: #{number}
Link: {pr_url}

Note: do not push changes directly. Propose the fix first and wait for the user's confirmation before acting.

"""


def skill_preamble(repo: str, pr_number: int, pr_url: str) -> str:
    """Return the fixed preamble naming the analysis skill and the PR."""

    return _PREAMBLE.format(
        skill=SKILL_NAME, repo=repo, number=pr_number, pr_url=pr_url
    )


def compose_context(repo: str, pr_number: int, pr_url: str, context: str) -> str:
    """Return the preamble for the PR followed by the free-text ``context``."""

    return skill_preamble(repo, pr_number, pr_url) + context


__all__ = ["SKILL_NAME", "compose_context", "skill_preamble"]
