"""Build deterministic prompts for CI failure diagnosis."""

from __future__ import annotations

from .types import Prompt

MAX_LOG_CHARS = 4000
ELISION_MARKER = "[... earlier log output omitted ...]\n"

FAILURE_TYPES = (
    "compile error",
    "test failure",
    "lint error",
    "dependency issue",
    "timeout",
    "permission issue",
    "other",
)

_TEMPLATE = """\
You are a senior CI/CD engineer who specializes in diagnosing failed GitHub Actions jobs.

Analyze the failure log of the CI job "{job_name}" below and reply in exactly this format:

[Failure type]
(choose one of: {failure_types})

[Root cause]
(explain the root cause of the failure in 1-2 sentences)

[Error details]
Error message: ...
Location: ...

[Fix suggestions]
1. ...
2. ...
3. ...

Rules:
Do not use tables.
Do not use markdown or other markup symbols (such as ##, ** or leading dashes).
Reply in plain text only.

Log:
```
{log}
```
"""


def truncate_log(raw_log: str, *, limit: int = MAX_LOG_CHARS) -> str:
    """Return ``raw_log`` or its last ``limit`` characters behind a marker.

    Failures are usually reported near the end of a job log, so the head is
    dropped. Lengths count code points, never bytes.
    """

    if len(raw_log) <= limit:
        return raw_log
    return ELISION_MARKER + raw_log[-limit:]


def build_prompt(job_name: str, truncated_log: str) -> Prompt:
    """Return the diagnosis prompt for ``job_name`` and its (truncated) log.

    Both values are embedded verbatim: the prompt travels as a JSON string
    field, never through a shell or markup layer.
    """

    text = _TEMPLATE.format(
        job_name=job_name,
        failure_types=" / ".join(FAILURE_TYPES),
        log=truncated_log,
    )
    return Prompt(text=text, job_name=job_name)


__all__ = [
    "ELISION_MARKER",
    "FAILURE_TYPES",
    "MAX_LOG_CHARS",
    "build_prompt",
    "truncate_log",
]
