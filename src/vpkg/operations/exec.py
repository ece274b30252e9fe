"""Running installed cli-command packages."""

import sys
from collections.abc import Sequence
from pathlib import Path

from vpkg.context import VpkgContext
from vpkg.errors import EntryPointNotFoundError, InvalidPackageKindError, NotInstalledError
from vpkg.integrations.process import ProcessResult
from vpkg.operations.resolve import parse_specifier

DEFAULT_ENTRY = "cmd/main.go"

_RUNNERS: dict[str, list[str]] = {
    ".go": ["go", "run"],
    ".py": [sys.executable],
}


def entry_command(entry: Path, args: Sequence[str]) -> list[str]:
    """Command line for an entry point; files without a known runner run directly."""
    runner = _RUNNERS.get(entry.suffix, [])
    return [*runner, str(entry), *args]


def exec_package(ctx: VpkgContext, name: str, args: Sequence[str]) -> ProcessResult:
    """Run an installed cli-command package with the given arguments.

    Raises:
        InvalidSpecifierError: If name is not namespace/short-name
        NotInstalledError: If no installed package has that name
        InvalidPackageKindError: If the package is not a cli-command
        EntryPointNotFoundError: If the entry point file is missing
    """
    spec = parse_specifier(name)
    installed = ctx.installed_index().find(spec.name)
    if installed is None:
        raise NotInstalledError(spec.name, ctx.install_root)

    record = installed.record
    if record.kind != "cli-command":
        raise InvalidPackageKindError(spec.name, record.kind, "cli-command")

    entry = installed.directory / (record.meta.entry or DEFAULT_ENTRY)
    if not entry.is_file():
        raise EntryPointNotFoundError(spec.name, entry)

    return ctx.process_runner.run(entry_command(entry, args), cwd=ctx.project_root)
