"""Open a terminal session running a command, where the platform allows it."""

from __future__ import annotations

import logging
import subprocess
import sys
import threading
from typing import Protocol

from ..errors import LaunchFailed, UnsupportedPlatform
from .quoting import escape_applescript

LOGGER = logging.getLogger(__name__)

_ITERM_SCRIPT = """\
tell application "iTerm"
    activate
    create window with default profile
    tell current session of window 1
        write text "{command}"
    end tell
end tell"""


class TerminalLauncher(Protocol):
    """Capability to type a shell command into a fresh terminal window."""

    def launch(self, command: str) -> None:
        """Start ``command`` in a new terminal session without waiting for it."""


def iterm_script(command: str) -> str:
    """Return the AppleScript that types ``command`` into a new iTerm window."""

    return _ITERM_SCRIPT.format(command=escape_applescript(command))


class ITermLauncher(TerminalLauncher):
    """Drive iTerm through ``osascript`` on macOS."""

    def __init__(self, osascript: str = "osascript") -> None:
        self.osascript = osascript
        self.process: subprocess.Popen[bytes] | None = None

    def launch(self, command: str) -> None:
        script = iterm_script(command)
        LOGGER.info("launching terminal via %s", self.osascript)
        try:
            proc = subprocess.Popen(
                [self.osascript, "-e", script],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise LaunchFailed(str(exc)) from exc
        self.process = proc
        # reap the child without blocking the caller
        threading.Thread(target=proc.wait, daemon=True).start()


class UnsupportedLauncher(TerminalLauncher):
    """Stand-in for platforms without terminal automation."""

    def __init__(self, platform: str) -> None:
        self.platform = platform

    def launch(self, command: str) -> None:
        raise UnsupportedPlatform(self.platform)


def create_launcher(platform: str | None = None) -> TerminalLauncher:
    """Return the launcher for ``platform`` (defaults to ``sys.platform``)."""

    if platform is None:
        platform = sys.platform
    if platform == "darwin":
        return ITermLauncher()
    LOGGER.debug("no terminal automation available on %s", platform)
    return UnsupportedLauncher(platform)


__all__ = [
    "ITermLauncher",
    "TerminalLauncher",
    "UnsupportedLauncher",
    "create_launcher",
    "iterm_script",
]
