"""Substitute PR values into a user-defined CLI command template."""

from __future__ import annotations

import logging
import re

from ..errors import EmptyTemplate
from .context import compose_context
from .quoting import shell_quote
from .types import DispatchContext

LOGGER = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{(context|repo|number|pr_url)\}")


def render_command(dispatch: DispatchContext) -> str:
    """Return the shell command for ``dispatch``.

    Placeholders are replaced in one pass over the template, so a value that
    itself contains ``{repo}`` is not expanded again. Unknown placeholders are
    left as written.
    """

    template = dispatch.command_template.strip()
    if not template:
        raise EmptyTemplate()
    full_input = compose_context(
        dispatch.repo, dispatch.pr_number, dispatch.pr_url, dispatch.freeform_context
    )
    values = {
        "context": shell_quote(full_input),
        "repo": shell_quote(dispatch.repo),
        # int() keeps the only unquoted value numeric
        "number": str(int(dispatch.pr_number)),
        "pr_url": shell_quote(dispatch.pr_url),
    }
    command = PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)
    LOGGER.debug("rendered command template %r", template)
    return command


__all__ = ["PLACEHOLDER_RE", "render_command"]
