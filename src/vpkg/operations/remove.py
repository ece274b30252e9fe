"""Removal of installed packages."""

import logging
import shutil
from pathlib import Path

from vpkg.context import VpkgContext
from vpkg.errors import FilesystemError, NotInstalledError
from vpkg.io.installed import BACKUP_MARKER
from vpkg.models.installation import RemovalResult
from vpkg.operations.install import default_destination
from vpkg.operations.resolve import parse_specifier

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def locate_installed(ctx: VpkgContext, name: str) -> Path:
    """Find the directory of an installed package.

    The conventional <install_root>/<namespace>/<short-name> location is
    checked first; packages installed elsewhere under the install root are
    found through their metadata record.

    Raises:
        NotInstalledError: If neither lookup finds the package
    """
    conventional = default_destination(ctx.install_root, name)
    if conventional.is_dir():
        return conventional

    entry = ctx.installed_index().find(name)
    if entry is not None:
        return entry.directory

    raise NotInstalledError(name, ctx.install_root)


def backup_path_for(path: Path, ctx: VpkgContext) -> Path:
    stamp = ctx.clock.now().strftime(BACKUP_TIMESTAMP_FORMAT)
    return path.with_name(f"{path.name}{BACKUP_MARKER}{stamp}")


def remove_package(ctx: VpkgContext, name: str, *, backup: bool = False) -> RemovalResult:
    """Remove an installed package, or move it aside when backup is set.

    With backup the directory is renamed to a timestamp-suffixed sibling
    (``cache.backup.20240115-103000``) and nothing is deleted.

    Raises:
        InvalidSpecifierError: If name is not namespace/short-name
        NotInstalledError: If the package is not installed
        FilesystemError: If the rename or delete fails
    """
    spec = parse_specifier(name)
    path = locate_installed(ctx, spec.name)

    if backup:
        target = backup_path_for(path, ctx)
        if target.exists():
            raise FilesystemError("rename", path, f"backup {target} already exists")
        try:
            path.rename(target)
        except OSError as e:
            raise FilesystemError("rename", path, str(e)) from e
        logger.debug("Backed up %s to %s", path, target)
        return RemovalResult(package_name=spec.name, path=path, backup_path=target)

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError("delete", path, str(e)) from e
    logger.debug("Deleted %s", path)
    return RemovalResult(package_name=spec.name, path=path)
