"""External process collaborators: the editor and one-shot shell commands.

The state machine only decides when to launch and with which arguments.
Launching lives behind ``ProcessRunner`` so tests can swap in a fake and the
runtime can suspend the TUI around interactive programs.
"""

from __future__ import annotations

import contextlib
import logging
import subprocess
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from .errors import ProcessLaunchError, describe_os_error

logger = logging.getLogger(__name__)

DEFAULT_EDITOR: tuple[str, ...] = ("nvim",)


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of a finished command."""

    returncode: int
    stdout: str
    stderr: str

    def summary(self) -> str:
        """Trimmed stdout when present, else trimmed stderr."""
        out = self.stdout.strip()
        if out:
            return out
        return self.stderr.strip()


class ProcessRunner:
    """Interface used by the controllers to run external programs."""

    def launch_editor(self, name: str, cwd: Path) -> int:
        """Run the editor on ``name`` inside ``cwd`` and return its exit status."""
        raise NotImplementedError

    def run_command(self, argv: Sequence[str], cwd: Path) -> CommandOutput:
        """Run ``argv`` inside ``cwd`` capturing stdout and stderr."""
        raise NotImplementedError


@contextlib.contextmanager
def _no_suspend() -> Iterator[None]:
    yield


class SubprocessRunner(ProcessRunner):
    """``subprocess``-backed runner.

    ``suspend_tui`` is a context-manager factory wrapped around the editor so
    the terminal is back in cooked mode while the editor owns it.
    """

    def __init__(
        self,
        editor_command: Sequence[str] = DEFAULT_EDITOR,
        suspend_tui: Callable[[], contextlib.AbstractContextManager[None]] | None = None,
    ) -> None:
        self.editor_command = tuple(editor_command) or DEFAULT_EDITOR
        self._suspend_tui = suspend_tui if suspend_tui is not None else _no_suspend

    def launch_editor(self, name: str, cwd: Path) -> int:
        argv = [*self.editor_command, name]
        logger.info("launching editor %s in %s", argv, cwd)
        with self._suspend_tui():
            try:
                completed = subprocess.run(argv, cwd=cwd, check=False)
            except OSError as exc:
                raise ProcessLaunchError(describe_os_error(exc)) from exc
        return completed.returncode

    def run_command(self, argv: Sequence[str], cwd: Path) -> CommandOutput:
        if not argv:
            raise ProcessLaunchError("No command given.")
        logger.info("running command %s in %s", list(argv), cwd)
        try:
            completed = subprocess.run(
                list(argv),
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise ProcessLaunchError(describe_os_error(exc)) from exc
        return CommandOutput(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )


__all__ = [
    "DEFAULT_EDITOR",
    "CommandOutput",
    "ProcessRunner",
    "SubprocessRunner",
]
