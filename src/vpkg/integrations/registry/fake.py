"""Fake RegistryClient implementation for testing.

Serves an in-memory registry: one index, manifests keyed by URL, file bytes
keyed by full URL and directory listings keyed by listing URL. Every call is
recorded so tests can assert which requests an operation made.
"""

from vpkg.errors import NetworkError, RemoteFileNotFoundError
from vpkg.integrations.registry.abc import RegistryClient, RemoteEntry, join_url
from vpkg.models.registry import RegistryIndex, RepositoryManifest

FAKE_REGISTRY_URL = "https://registry.example.test/registry.yaml"


class FakeRegistryClient(RegistryClient):
    """In-memory registry client.

    URLs listed in failing_urls answer with a NetworkError (HTTP 503) for any
    kind of request.
    """

    def __init__(
        self,
        *,
        index: RegistryIndex | None = None,
        manifests: dict[str, RepositoryManifest] | None = None,
        files: dict[str, bytes] | None = None,
        listings: dict[str, list[RemoteEntry]] | None = None,
        failing_urls: set[str] | None = None,
        registry_url: str = FAKE_REGISTRY_URL,
    ) -> None:
        self._index = index
        self._manifests = dict(manifests or {})
        self._files = dict(files or {})
        self._listings = dict(listings or {})
        self._failing_urls = set(failing_urls or set())
        self._registry_url = registry_url
        self._fetched_manifests: list[str] = []
        self._fetched_files: list[str] = []
        self._probed_urls: list[str] = []
        self._listed_urls: list[str] = []

    @property
    def registry_url(self) -> str:
        return self._registry_url

    @property
    def fetched_manifests(self) -> list[str]:
        """Manifest URLs requested, in order."""
        return self._fetched_manifests

    @property
    def fetched_files(self) -> list[str]:
        """File URLs requested, in order."""
        return self._fetched_files

    @property
    def probed_urls(self) -> list[str]:
        """URLs passed to file_exists(), in order."""
        return self._probed_urls

    @property
    def listed_urls(self) -> list[str]:
        """Directory listing URLs requested, in order."""
        return self._listed_urls

    def set_file(self, url: str, content: bytes) -> None:
        """Replace the content served at url (simulates a repository update)."""
        self._files[url] = content

    def fetch_index(self) -> RegistryIndex:
        self._check_available(self._registry_url)
        if self._index is None:
            raise NetworkError(self._registry_url, "Not Found", status_code=404)
        return self._index

    def fetch_manifest(self, manifest_url: str) -> RepositoryManifest:
        self._fetched_manifests.append(manifest_url)
        self._check_available(manifest_url)
        if manifest_url not in self._manifests:
            raise NetworkError(manifest_url, "Not Found", status_code=404)
        return self._manifests[manifest_url]

    def fetch_file(self, base_url: str, relative_path: str) -> bytes:
        url = join_url(base_url, relative_path)
        self._fetched_files.append(url)
        self._check_available(url)
        if url not in self._files:
            raise RemoteFileNotFoundError(url)
        return self._files[url]

    def file_exists(self, base_url: str, relative_path: str) -> bool:
        url = join_url(base_url, relative_path)
        self._probed_urls.append(url)
        if url in self._failing_urls:
            return False
        return url in self._files

    def list_directory(self, listing_url: str) -> list[RemoteEntry]:
        self._listed_urls.append(listing_url)
        self._check_available(listing_url)
        if listing_url not in self._listings:
            raise NetworkError(listing_url, "Not Found", status_code=404)
        return self._listings[listing_url]

    def _check_available(self, url: str) -> None:
        if url in self._failing_urls:
            raise NetworkError(url, "Service Unavailable", status_code=503)
