"""
Collaborators used by the profile manager.

- Notifier: shows an error message with one action and returns the choice.
- CommandRunner: runs an ASK CLI subcommand (e.g. "init").
- LinkOpener: opens a URL with the desktop's default handler (Gio).

Each has a Protocol plus the default implementation wired up by the CLI.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Callable, Optional, Protocol, TextIO

from .errors import ToolExecutionError

try:
    import gi
    gi.require_version("Gio", "2.0")
    from gi.repository import Gio  # type: ignore
except Exception:
    Gio = None  # type: ignore


logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def show_error_choice(self, message: str, action_label: str) -> Optional[str]:
        """Show `message` with a single action; return the label if picked, else None."""
        ...


class CommandRunner(Protocol):
    def run(self, command_name: str) -> None:
        ...


class LinkOpener(Protocol):
    def open(self, url: str) -> None:
        ...


class ConsoleNotifier:
    """
    Terminal stand-in for an editor's error notification.

    Writes the message to stderr and asks a yes/no question. Anything but an
    explicit yes (including EOF when stdin is not interactive) is a dismissal.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        read_answer: Callable[[str], str] = input,
    ) -> None:
        self._stream = stream
        self._read_answer = read_answer

    def show_error_choice(self, message: str, action_label: str) -> Optional[str]:
        out = self._stream or sys.stderr
        print(f"Error: {message}", file=out)
        try:
            answer = self._read_answer(f"{action_label}? [y/N] ")
        except EOFError:
            return None
        if answer.strip().lower() in ("y", "yes"):
            return action_label
        return None


class SubprocessCommandRunner:
    """Runs `<executable> <command_name>` attached to the current terminal."""

    def __init__(self, executable: str) -> None:
        self._executable = executable

    def run(self, command_name: str) -> None:
        argv = [self._executable, command_name]
        logger.info("Running %s", " ".join(argv))
        try:
            proc = subprocess.run(argv, shell=False)
        except OSError as e:
            raise ToolExecutionError(str(e)) from e
        if proc.returncode != 0:
            raise ToolExecutionError(f"'{' '.join(argv)}' exited with {proc.returncode}")


def _ensure_gio() -> None:
    if Gio is None:
        raise RuntimeError("Gio not available (PyGObject missing)")


class GioLinkOpener:
    """Opens URLs through Gio.AppInfo, i.e. the user's default browser."""

    def open(self, url: str) -> None:
        _ensure_gio()
        logger.info("Opening %s", url)
        Gio.AppInfo.launch_default_for_uri(url, None)  # type: ignore
