"""Fake ProcessRunner implementation for testing."""

from collections.abc import Sequence
from pathlib import Path

from vpkg.integrations.process.abc import ProcessResult, ProcessRunner


class FakeProcessRunner(ProcessRunner):
    """In-memory runner that records calls instead of spawning programs.

    Exit codes are looked up by the last path component of the first argument
    that names a file (the provider or entry point); unknown commands exit 0.
    """

    def __init__(self, *, exit_codes: dict[str, int] | None = None) -> None:
        self._exit_codes = exit_codes or {}
        self._calls: list[tuple[tuple[str, ...], Path]] = []

    @property
    def calls(self) -> list[tuple[tuple[str, ...], Path]]:
        """Read-only access to (command, cwd) pairs in call order."""
        return self._calls

    def run(self, command: Sequence[str], cwd: Path) -> ProcessResult:
        cmd = tuple(str(arg) for arg in command)
        self._calls.append((cmd, cwd))
        for arg in cmd:
            name = Path(arg).name
            if name in self._exit_codes:
                return ProcessResult(command=cmd, returncode=self._exit_codes[name])
        return ProcessResult(command=cmd, returncode=0)
