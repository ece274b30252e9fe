"""Supervised subprocess abstraction.

Package-provided programs (sync providers, cli-command entry points) are run
through this interface. Implementations never raise for a failing program:
they return a ProcessResult describing the outcome so callers can report the
failing package and stop.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of running an external program."""

    command: tuple[str, ...]
    returncode: int | None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.returncode == 0 and self.error is None

    def describe_failure(self) -> str:
        """Human-readable failure cause for error reporting."""
        if self.error is not None:
            return self.error
        cmd_str = " ".join(self.command)
        return f"Command exited with status {self.returncode}: {cmd_str}"


class ProcessRunner(ABC):
    """Abstract interface for running package-provided programs."""

    @abstractmethod
    def run(self, command: Sequence[str], cwd: Path) -> ProcessResult:
        """Run a command with output streamed to the terminal.

        Args:
            command: Program and arguments
            cwd: Working directory for the program

        Returns:
            ProcessResult with the exit status, or an error description when
            the program could not be started
        """
        ...
