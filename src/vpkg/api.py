"""Public API for vpkg.

Stable, high-level entry points for tools that use vpkg as a library. Each
call builds its own context for project_dir, runs one operation, and
releases the registry client afterwards. Callers that run several operations
or need fakes should build a VpkgContext and call vpkg.operations directly.

Example usage:
    from pathlib import Path
    from vpkg.api import install, run_sync_capabilities

    receipt = install(Path("/path/to/project"), "acme/cache@1.2.0")
    print(receipt.usage)

    report = run_sync_capabilities(Path("/path/to/project"))
    if report.failure is not None:
        print(f"{report.failure.package_name}: {report.failure.cause}")
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from vpkg.context import VpkgContext, create_context
from vpkg.models.installation import (
    InstalledPackageRecord,
    InstallOptions,
    InstallReceipt,
    ListFilter,
    RemovalResult,
)
from vpkg.operations.install import install_package
from vpkg.operations.listing import AvailablePackage, list_available, list_installed
from vpkg.operations.remove import remove_package
from vpkg.operations.sync import SyncReport
from vpkg.operations.sync import run_sync_capabilities as _run_sync_capabilities

__all__ = [
    "install",
    "remove",
    "available_packages",
    "installed_packages",
    "run_sync_capabilities",
]


@contextmanager
def _context(project_dir: Path, registry_url: str | None) -> Iterator[VpkgContext]:
    ctx = create_context(project_root=project_dir, registry_url=registry_url, quiet=True)
    try:
        yield ctx
    finally:
        ctx.registry.close()


def install(
    project_dir: Path,
    specifier: str,
    *,
    destination: str | None = None,
    force: bool = False,
    dry_run: bool = False,
    version: str | None = None,
    registry_url: str | None = None,
) -> InstallReceipt:
    """Install a package into project_dir. See vpkg.operations.install."""
    options = InstallOptions(destination=destination, force=force, dry_run=dry_run, version=version)
    with _context(project_dir, registry_url) as ctx:
        return install_package(ctx, specifier, options)


def remove(project_dir: Path, name: str, *, backup: bool = False) -> RemovalResult:
    """Remove (or back up) an installed package."""
    with _context(project_dir, None) as ctx:
        return remove_package(ctx, name, backup=backup)


def available_packages(
    project_dir: Path,
    *,
    tags: list[str] | None = None,
    kind: str | None = None,
    registry_url: str | None = None,
) -> list[AvailablePackage]:
    with _context(project_dir, registry_url) as ctx:
        return list_available(ctx, ListFilter(tags=tags or [], kind=kind))


def installed_packages(project_dir: Path) -> list[InstalledPackageRecord]:
    with _context(project_dir, None) as ctx:
        return list_installed(ctx)


def run_sync_capabilities(project_dir: Path) -> SyncReport:
    """Run every installed sync provider, stopping at the first failure."""
    with _context(project_dir, None) as ctx:
        return _run_sync_capabilities(ctx)
