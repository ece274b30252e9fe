"""Installed package metadata files and the installed package index.

Each installed package directory holds one METADATA_FILENAME record. There is
no central database: InstalledPackageIndex.scan() walks the install root once
per invocation and every read of "what is installed" goes through the index
it returns.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from vpkg.errors import FilesystemError, SchemaError
from vpkg.models.installation import METADATA_FILENAME, InstalledPackageRecord

logger = logging.getLogger(__name__)

BACKUP_MARKER = ".backup."


def metadata_path(package_dir: Path) -> Path:
    return package_dir / METADATA_FILENAME


def load_record(package_dir: Path) -> InstalledPackageRecord:
    """Load the metadata record of one installed package directory.

    Raises:
        FileNotFoundError: If the directory has no metadata file
        SchemaError: If the metadata file is malformed or not valid UTF-8
        OSError: If the metadata file exists but cannot be read
    """
    path = metadata_path(package_dir)
    if not path.exists():
        raise FileNotFoundError(f"No {METADATA_FILENAME} in {package_dir}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SchemaError(str(path), f"not valid UTF-8: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SchemaError(str(path), f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise SchemaError(str(path), "expected a mapping at the document root")

    try:
        return InstalledPackageRecord.model_validate(data)
    except ValidationError as e:
        raise SchemaError(str(path), f"{e.error_count()} validation error(s)") from e


def save_record(package_dir: Path, record: InstalledPackageRecord) -> Path:
    """Write the metadata record into package_dir, replacing any previous one."""
    path = metadata_path(package_dir)
    content = yaml.safe_dump(record.to_document(), sort_keys=False, allow_unicode=True)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FilesystemError("write", path, str(e)) from e
    return path


@dataclass(frozen=True)
class InstalledPackage:
    """An installed package: its record and the directory holding it."""

    record: InstalledPackageRecord
    directory: Path

    @property
    def name(self) -> str:
        return self.record.name


class InstalledPackageIndex:
    """In-memory view of every package installed under one install root.

    Entries are unique per directory and ordered by path, so the result does
    not depend on filesystem traversal order. Directories renamed to a backup
    sibling by remove are not installed packages and are skipped, as are
    directories whose metadata file is malformed, not UTF-8 or unreadable.
    """

    def __init__(self, install_root: Path, entries: list[InstalledPackage]) -> None:
        self._install_root = install_root
        self._entries = entries

    @classmethod
    def scan(cls, install_root: Path) -> "InstalledPackageIndex":
        if not install_root.is_dir():
            return cls(install_root, [])

        by_directory: dict[Path, InstalledPackage] = {}
        for path in install_root.rglob(METADATA_FILENAME):
            if not path.is_file():
                continue
            package_dir = path.parent
            relative_parts = package_dir.relative_to(install_root).parts
            if any(BACKUP_MARKER in part for part in relative_parts):
                continue

            try:
                record = load_record(package_dir)
            except SchemaError as e:
                logger.warning("Skipping %s: %s", package_dir, e)
                continue
            except OSError as e:
                logger.warning("Skipping %s: cannot read %s: %s", package_dir, METADATA_FILENAME, e)
                continue

            by_directory[package_dir.resolve()] = InstalledPackage(
                record=record, directory=package_dir
            )

        entries = sorted(by_directory.values(), key=lambda entry: entry.directory.as_posix())
        logger.debug("Found %d installed package(s) under %s", len(entries), install_root)
        return cls(install_root, entries)

    @property
    def install_root(self) -> Path:
        return self._install_root

    @property
    def entries(self) -> list[InstalledPackage]:
        return list(self._entries)

    def records(self) -> list[InstalledPackageRecord]:
        return [entry.record for entry in self._entries]

    def find(self, name: str) -> InstalledPackage | None:
        """Return the first installed package (by path) with the given name."""
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)
