import getpass
import os
import subprocess
from typing import Sequence

from prwatch.core.exceptions import (
    ProcessLaunchError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
)
from prwatch.core.ports.command_runner import CommandRunner

INSTALL_HINT = "GitHub CLI not found. Install with: brew install gh"


class GhCommandRunner(CommandRunner):
    """Runs the ``gh`` binary, one process per call.

    GUI and service environments often lack the login shell's PATH, so the
    binary is looked up in a fixed list of install locations.
    """

    def __init__(self, candidate_paths: Sequence[str], timeout: float) -> None:
        self._candidate_paths = tuple(candidate_paths)
        self._timeout = timeout

    def locate(self) -> str:
        searched = tuple(self._expand(path) for path in self._candidate_paths)
        for path in searched:
            if os.path.isfile(path) and os.access(path, os.X_OK):
                return path
        raise ToolNotFoundError(INSTALL_HINT, searched_paths=searched)

    def run(self, args: Sequence[str]) -> bytes:
        binary = self.locate()
        try:
            completed = subprocess.run(
                [binary, *args],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            raise ToolTimeoutError(
                f"gh {' '.join(args[:2])} timed out after {self._timeout:g}s",
                timeout=self._timeout,
            ) from error
        except OSError as error:
            raise ProcessLaunchError(str(error)) from error

        if completed.returncode != 0:
            output = (completed.stdout or b"") + (completed.stderr or b"")
            message = output.decode("utf-8", errors="replace").strip()
            raise ToolExecutionError(
                message or "Unknown error",
                exit_code=completed.returncode,
            )
        return completed.stdout

    def _expand(self, path: str) -> str:
        if "{user}" not in path:
            return path
        return path.format(user=_current_user())


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""
