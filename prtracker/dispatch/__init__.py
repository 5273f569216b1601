"""Command dispatch pipeline: compose context, fill the template, launch."""

from .context import compose_context, skill_preamble
from .quoting import escape_applescript, shell_quote
from .template import render_command
from .terminal import (
    ITermLauncher,
    TerminalLauncher,
    UnsupportedLauncher,
    create_launcher,
)
from .types import DispatchContext

__all__ = [
    "DispatchContext",
    "ITermLauncher",
    "TerminalLauncher",
    "UnsupportedLauncher",
    "compose_context",
    "create_launcher",
    "escape_applescript",
    "render_command",
    "shell_quote",
    "skill_preamble",
]
