"""Escaping for the two layers a dispatched command passes through.

A command is quoted once for the POSIX shell that runs it and the result is
escaped again for the AppleScript string literal that types it into the
terminal. Keep the two steps separate.
"""

from __future__ import annotations


def shell_quote(value: str) -> str:
    """Return ``value`` as a single literal POSIX shell word.

    Inside single quotes nothing is special except the closing quote, so each
    ``'`` is written as close-quote, escaped quote, reopen-quote.
    """

    return "'" + value.replace("'", "'\"'\"'") + "'"


def escape_applescript(value: str) -> str:
    """Return ``value`` escaped for an AppleScript double-quoted string."""

    return value.replace("\\", "\\\\").replace('"', '\\"')


__all__ = ["escape_applescript", "shell_quote"]
