"""Installation models: options, render context, receipts and the persisted record."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vpkg.models.registry import PackageDescriptor, PackageKind

METADATA_FILENAME = ".vpkg-meta.yaml"


class InstalledPackageRecord(BaseModel):
    """Persisted metadata describing one locally installed package.

    Written as METADATA_FILENAME inside the installed directory. The set of
    these files under the install root is the installed-package database.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    version: str
    installed_at: datetime
    path: str
    kind: PackageKind = Field(alias="type")
    meta: PackageDescriptor

    def to_document(self) -> dict[str, Any]:
        """Serialize using wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class InstallOptions:
    """Caller-supplied install options."""

    destination: str | None = None
    force: bool = False
    dry_run: bool = False
    version: str | None = None


@dataclass(frozen=True)
class RenderContext:
    """Values substituted into every template of one install.

    Built once per install and passed unchanged into each render. The
    identifier fields are a pure function of the package specifier.
    """

    module_identifier: str
    package_specifier: str
    namespace: str
    short_name: str
    sanitized_identifier: str
    destination_path: str
    version: str
    author: str
    timestamp: str
    title: str
    description: str

    def as_template_vars(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class InstallReceipt:
    """Outcome of an install (or of a dry run)."""

    package_name: str
    version: str
    kind: PackageKind
    destination: Path
    files: list[Path]
    usage: str
    dry_run: bool = False
    record: InstalledPackageRecord | None = None


@dataclass(frozen=True)
class RemovalResult:
    """Outcome of removing an installed package."""

    package_name: str
    path: Path
    backup_path: Path | None = None

    @property
    def backed_up(self) -> bool:
        return self.backup_path is not None


@dataclass(frozen=True)
class ListFilter:
    """Filters for listing available packages."""

    tags: list[str] = field(default_factory=list)
    kind: str | None = None
