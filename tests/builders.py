"""Builders for registry documents and the acme/cache test repository."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from vpkg.io.installed import save_record
from vpkg.models.installation import InstalledPackageRecord
from vpkg.models.registry import (
    PackageDescriptor,
    RegistryIndex,
    RepositoryManifest,
    RepositoryRef,
)

ACME_MANIFEST_URL = "https://raw.githubusercontent.com/acme/vpkg-packages/main/meta.yaml"
ACME_BASE_URL = "https://raw.githubusercontent.com/acme/vpkg-packages/main"
ACME_LISTING_URL = "https://api.github.com/repos/acme/vpkg-packages/contents/templates?ref=main"

CLIENT_TEMPLATE = (
    b"package {{ sanitized_identifier }}\n"
    b"\n"
    b"// {{ package_specifier }} v{{ version }}\n"
    b'const Name = "{{ short_name | pascal }}"\n'
)
README = b"# Cache\n\nTemplates use {{ braces }} that must survive a verbatim copy.\n"
INSTALLED_AT = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


def make_descriptor(name: str = "acme/cache", **overrides: Any) -> PackageDescriptor:
    """Build a descriptor from wire field names, as a manifest would."""
    data: dict[str, Any] = {
        "name": name,
        "title": "Cache",
        "description": "Redis-backed cache module",
        "type": "library-module",
        "templates": "templates",
        "version": "1.0.0",
        "tags": ["cache"],
    }
    data.update(overrides)
    return PackageDescriptor.model_validate(data)


def make_repository(name: str, manifest_url: str) -> RepositoryRef:
    return RepositoryRef.model_validate({"name": name, "meta_url": manifest_url})


def make_index(*repositories: RepositoryRef) -> RegistryIndex:
    return RegistryIndex(repositories=list(repositories))


def make_manifest(*packages: PackageDescriptor) -> RepositoryManifest:
    return RepositoryManifest(packages=list(packages))


def install_record(
    install_root: Path,
    name: str,
    *,
    directory: Path | None = None,
    version: str = "1.0.0",
    **descriptor_overrides: Any,
) -> Path:
    """Write an installed package directory with its metadata record.

    The directory defaults to <install_root>/<namespace>/<short-name>.
    """
    descriptor = make_descriptor(name, version=version, **descriptor_overrides)
    package_dir = directory if directory is not None else install_root / name
    package_dir.mkdir(parents=True, exist_ok=True)
    record = InstalledPackageRecord(
        name=name,
        version=version,
        installed_at=INSTALLED_AT,
        path=package_dir.relative_to(install_root.parent).as_posix(),
        kind=descriptor.kind,
        meta=descriptor,
    )
    save_record(package_dir, record)
    return package_dir
