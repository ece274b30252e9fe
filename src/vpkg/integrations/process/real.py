"""Real process runner using subprocess."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from vpkg.integrations.process.abc import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


class RealProcessRunner(ProcessRunner):
    """Production implementation using subprocess.run().

    stdout/stderr are inherited so the program's output streams straight to
    the user's terminal.
    """

    def run(self, command: Sequence[str], cwd: Path) -> ProcessResult:
        cmd = tuple(str(arg) for arg in command)
        logger.debug("Running %s in %s", " ".join(cmd), cwd)
        try:
            result = subprocess.run(cmd, cwd=cwd, check=False)
        except FileNotFoundError:
            return ProcessResult(
                command=cmd,
                returncode=None,
                error=f"Command not found: {cmd[0]}",
            )
        except PermissionError:
            return ProcessResult(
                command=cmd,
                returncode=None,
                error=f"Permission denied executing: {cmd[0]}",
            )

        return ProcessResult(command=cmd, returncode=result.returncode)
