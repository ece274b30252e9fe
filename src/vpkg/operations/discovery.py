"""Template discovery: enumerate the files of a package's template root.

Discovery runs an explicit, ordered list of strategies. Each returns the
files it found (relative to the template root) or an empty tuple; the first
non-empty result wins and results from different strategies are never
merged.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from urllib.parse import quote, urlsplit

from vpkg.errors import NetworkError, SchemaError
from vpkg.integrations.registry import RegistryClient
from vpkg.operations.resolve import ResolvedPackage

logger = logging.getLogger(__name__)

# Longest first so the most specific suffix is stripped.
TEMPLATE_SUFFIXES: tuple[str, ...] = (".gotmpl", ".templ", ".tmpl")

GITHUB_API_URL = "https://api.github.com"
DEFAULT_REF = "main"
DEFAULT_MAX_DEPTH = 3


def template_suffix(path: str) -> str | None:
    """Return the recognized template suffix of path, if any."""
    for suffix in TEMPLATE_SUFFIXES:
        if path.endswith(suffix):
            return suffix
    return None


def is_template(path: str) -> bool:
    return template_suffix(path) is not None


def strip_template_suffix(path: str) -> str:
    """Output path for a source path: the template suffix removed, if present.

    Examples:
        >>> strip_template_suffix("service.go.tmpl")
        'service.go'
        >>> strip_template_suffix("handler.templ")
        'handler'
        >>> strip_template_suffix("README.md")
        'README.md'
    """
    suffix = template_suffix(path)
    if suffix is None:
        return path
    return path[: -len(suffix)]


@dataclass(frozen=True)
class DiscoveryOutcome:
    """Result of template discovery.

    strategy names the strategy that found the files, or is None when every
    strategy came back empty.
    """

    strategy: str | None
    files: tuple[str, ...]

    @property
    def found(self) -> bool:
        return len(self.files) > 0


class DiscoveryStrategy(ABC):
    """One way of enumerating a package's template root."""

    name: str

    @abstractmethod
    def discover(self, registry: RegistryClient, resolved: ResolvedPackage) -> tuple[str, ...]:
        """Return files relative to the template root, or () when nothing was found."""
        ...


@dataclass(frozen=True)
class GitHubLocation:
    owner: str
    repo: str
    ref: str
    directory: str


def github_location(resolved: ResolvedPackage) -> GitHubLocation | None:
    """Locate the repository on GitHub, if it is hosted there.

    Manifests served from raw.githubusercontent.com carry the owner, repo, ref
    and the manifest's directory in their path. Otherwise a github.com
    repository URL gives owner and repo, with the default ref and the
    repository root as directory.
    """
    manifest = urlsplit(resolved.repository.manifest_url)
    if manifest.hostname == "raw.githubusercontent.com":
        parts = [part for part in manifest.path.split("/") if part]
        if len(parts) >= 4:
            owner, repo, ref = parts[0], parts[1], parts[2]
            directory = "/".join(parts[3:-1])
            return GitHubLocation(owner=owner, repo=repo, ref=ref, directory=directory)

    repository = urlsplit(resolved.repository.repository_url)
    if repository.hostname in ("github.com", "www.github.com"):
        parts = [part for part in repository.path.split("/") if part]
        if len(parts) >= 2:
            repo = parts[1].removesuffix(".git")
            return GitHubLocation(owner=parts[0], repo=repo, ref=DEFAULT_REF, directory="")

    return None


class _ListingFailed(Exception):
    pass


class TreeWalkStrategy(DiscoveryStrategy):
    """Walk the template root through the GitHub contents API.

    Returns every file under the root (templates and static assets alike),
    descending at most max_depth directory levels. Any failed listing makes
    the whole walk return nothing so a partial tree is never installed.
    """

    name = "tree-walk"

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, api_url: str = GITHUB_API_URL) -> None:
        self._max_depth = max_depth
        self._api_url = api_url.rstrip("/")

    def listing_url(self, location: GitHubLocation, templates_root: str) -> str:
        path = "/".join(part for part in (location.directory, templates_root) if part)
        return (
            f"{self._api_url}/repos/{location.owner}/{location.repo}"
            f"/contents/{quote(path)}?ref={quote(location.ref)}"
        )

    def discover(self, registry: RegistryClient, resolved: ResolvedPackage) -> tuple[str, ...]:
        location = github_location(resolved)
        if location is None:
            logger.debug("%s is not hosted on GitHub, skipping tree walk", resolved.repository.name)
            return ()

        url = self.listing_url(location, resolved.descriptor.templates_root)
        try:
            files = self._walk(registry, url, prefix="", depth=1)
        except _ListingFailed as e:
            logger.debug("Tree walk of %s failed: %s", url, e)
            return ()
        return tuple(sorted(files))

    def _walk(self, registry: RegistryClient, url: str, *, prefix: str, depth: int) -> list[str]:
        try:
            entries = registry.list_directory(url)
        except (NetworkError, SchemaError) as e:
            raise _ListingFailed(str(e)) from e

        files: list[str] = []
        for entry in entries:
            path = f"{prefix}{entry.name}"
            if entry.type == "file":
                files.append(path)
            elif entry.type == "dir":
                if depth >= self._max_depth:
                    logger.debug("Not descending into %s: depth limit %d", path, self._max_depth)
                    continue
                if not entry.url:
                    raise _ListingFailed(f"directory entry {path} has no listing url")
                files.extend(self._walk(registry, entry.url, prefix=f"{path}/", depth=depth + 1))
        return files


class ProbeStrategy(DiscoveryStrategy):
    """Probe a fixed list of conventional file names for existence.

    Candidates are root-level entry files, common one- and two-level layouts,
    and names derived from the package's short name, each crossed with every
    template suffix.
    """

    name = "probe"

    def candidates(self, resolved: ResolvedPackage) -> list[str]:
        short_name = resolved.descriptor.short_name
        patterns = [
            "main.go",
            "service.go",
            "README.md",
            f"{short_name}.go",
            f"{short_name.replace('-', '')}.go",
            "cmd/main.go",
            "internal/service.go",
            "handler.go",
            "config.go",
        ]
        result: list[str] = []
        for pattern in patterns:
            for suffix in reversed(TEMPLATE_SUFFIXES):
                candidate = f"{pattern}{suffix}"
                if candidate not in result:
                    result.append(candidate)
        return result

    def discover(self, registry: RegistryClient, resolved: ResolvedPackage) -> tuple[str, ...]:
        root = resolved.descriptor.templates_root
        found = []
        for candidate in self.candidates(resolved):
            relative = f"{root}/{candidate}" if root else candidate
            if registry.file_exists(resolved.base_url, relative):
                found.append(candidate)
        return tuple(found)


def default_strategies(max_depth: int = DEFAULT_MAX_DEPTH) -> list[DiscoveryStrategy]:
    return [TreeWalkStrategy(max_depth=max_depth), ProbeStrategy()]


def discover_templates(
    registry: RegistryClient,
    resolved: ResolvedPackage,
    strategies: list[DiscoveryStrategy] | None = None,
) -> DiscoveryOutcome:
    """Run discovery strategies in order until one finds files."""
    ordered = strategies if strategies is not None else default_strategies()
    for strategy in ordered:
        files = strategy.discover(registry, resolved)
        if files:
            logger.debug(
                "Discovered %d file(s) for %s via %s", len(files), resolved.name, strategy.name
            )
            return DiscoveryOutcome(strategy=strategy.name, files=files)
        logger.debug("Strategy %s found nothing for %s", strategy.name, resolved.name)

    return DiscoveryOutcome(strategy=None, files=())
