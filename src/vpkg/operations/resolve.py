"""Package specifier parsing and resolution against the registry."""

import logging
import re
from dataclasses import dataclass

from vpkg.errors import InvalidSpecifierError, NetworkError, PackageNotFoundError, SchemaError
from vpkg.integrations.registry import RegistryClient
from vpkg.models.registry import PackageDescriptor, RepositoryManifest, RepositoryRef

logger = logging.getLogger(__name__)

_NAME_PART = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class PackageSpecifier:
    """A parsed ``namespace/short-name[@version]`` specifier."""

    name: str
    version: str | None = None

    @property
    def namespace(self) -> str:
        return self.name.split("/")[0]

    @property
    def short_name(self) -> str:
        return self.name.split("/")[1]


def parse_specifier(specifier: str) -> PackageSpecifier:
    """Parse a package specifier.

    Examples:
        >>> parse_specifier("acme/cache")
        PackageSpecifier(name='acme/cache', version=None)
        >>> parse_specifier("acme/cache@1.2.0")
        PackageSpecifier(name='acme/cache', version='1.2.0')

    Raises:
        InvalidSpecifierError: If the name is not namespace/short-name or the
            version after ``@`` is empty
    """
    text = specifier.strip()
    name, sep, version = text.partition("@")
    if sep and not version:
        raise InvalidSpecifierError(specifier)

    parts = name.split("/")
    if len(parts) != 2 or not all(_NAME_PART.match(part) for part in parts):
        raise InvalidSpecifierError(specifier)

    return PackageSpecifier(name=name, version=version if sep else None)


@dataclass(frozen=True)
class ResolvedPackage:
    """A package located in the registry.

    requested_version is the version pinned by the caller (``@version`` in the
    specifier wins over an explicit version option), or None.
    """

    repository: RepositoryRef
    descriptor: PackageDescriptor
    manifest: RepositoryManifest
    requested_version: str | None = None

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def base_url(self) -> str:
        return self.repository.base_url

    @property
    def version(self) -> str:
        """Version recorded for the install."""
        if self.requested_version:
            return self.requested_version
        return self.descriptor.version


def resolve_package(
    registry: RegistryClient,
    specifier: str,
    *,
    version: str | None = None,
) -> ResolvedPackage:
    """Find the repository that provides a package.

    Repositories are visited one at a time in the order the registry index
    declares them and the first manifest listing the package wins. A manifest
    that cannot be fetched or parsed is logged and skipped, so one repository
    outage only matters if the package lives solely in that repository.

    Args:
        registry: Registry client for this invocation
        specifier: ``namespace/short-name[@version]``
        version: Version option from the caller; ``@version`` overrides it

    Raises:
        InvalidSpecifierError: If the specifier is malformed
        NetworkError: If the registry index itself is unreachable
        SchemaError: If the registry index is malformed
        PackageNotFoundError: If no reachable repository lists the package
    """
    spec = parse_specifier(specifier)
    requested_version = spec.version if spec.version is not None else version

    index = registry.fetch_index()
    for repository in index.repositories:
        try:
            manifest = registry.fetch_manifest(repository.manifest_url)
        except (NetworkError, SchemaError) as e:
            logger.warning("Skipping repository %s: %s", repository.name, e)
            continue

        descriptor = manifest.find(spec.name)
        if descriptor is not None:
            logger.debug("Resolved %s in repository %s", spec.name, repository.name)
            return ResolvedPackage(
                repository=repository,
                descriptor=descriptor,
                manifest=manifest,
                requested_version=requested_version,
            )

    raise PackageNotFoundError(spec.name, len(index.repositories))
