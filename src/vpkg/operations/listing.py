"""Listing available and installed packages."""

import logging
from dataclasses import dataclass

from vpkg.context import VpkgContext
from vpkg.errors import NetworkError, SchemaError
from vpkg.models.installation import InstalledPackageRecord, ListFilter
from vpkg.models.registry import PackageDescriptor, RepositoryRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailablePackage:
    repository: RepositoryRef
    descriptor: PackageDescriptor


def _matches(descriptor: PackageDescriptor, filters: ListFilter) -> bool:
    if filters.kind is not None and descriptor.kind != filters.kind:
        return False
    if filters.tags and not set(filters.tags) & set(descriptor.tags):
        return False
    return True


def list_available(ctx: VpkgContext, filters: ListFilter | None = None) -> list[AvailablePackage]:
    """All packages of every reachable repository, in registry order.

    A package matches the tag filter when it carries any of the given tags.
    Repositories whose manifest cannot be fetched are skipped with a warning.
    """
    active = filters if filters is not None else ListFilter()
    index = ctx.registry.fetch_index()

    packages: list[AvailablePackage] = []
    for repository in index.repositories:
        try:
            manifest = ctx.registry.fetch_manifest(repository.manifest_url)
        except (NetworkError, SchemaError) as e:
            logger.debug("Skipping repository %s: %s", repository.name, e)
            ctx.feedback.warning(f"Warning: Failed to fetch repository {repository.name}: {e}")
            continue

        for descriptor in manifest.packages:
            if _matches(descriptor, active):
                packages.append(AvailablePackage(repository=repository, descriptor=descriptor))

    return packages


def list_installed(ctx: VpkgContext) -> list[InstalledPackageRecord]:
    """Records of every package installed under the install root, ordered by path."""
    return ctx.installed_index().records()
