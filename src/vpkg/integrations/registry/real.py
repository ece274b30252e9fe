"""Real registry client over HTTP using httpx."""

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from vpkg.errors import NetworkError, RemoteFileNotFoundError, SchemaError
from vpkg.integrations.registry.abc import RegistryClient, RemoteEntry, join_url
from vpkg.io.documents import parse_registry_index, parse_repository_manifest
from vpkg.models.registry import RegistryIndex, RepositoryManifest
from vpkg.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TIMEOUT = 30.0
DEFAULT_PROBE_TIMEOUT = 5.0

_ENTRY_LIST = TypeAdapter(list[RemoteEntry])


class RealRegistryClient(RegistryClient):
    """Production implementation backed by a blocking httpx.Client.

    Every request is bounded by a timeout so one unresponsive repository
    cannot stall the whole operation. Use as a context manager (or call
    close()) to release the connection pool.
    """

    def __init__(
        self,
        registry_url: str,
        *,
        content_timeout: float = DEFAULT_CONTENT_TIMEOUT,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._registry_url = registry_url
        self._probe_timeout = probe_timeout
        self._client = httpx.Client(
            timeout=content_timeout,
            follow_redirects=True,
            transport=transport,
            headers={"User-Agent": f"vpkg/{__version__}"},
        )

    @property
    def registry_url(self) -> str:
        return self._registry_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RealRegistryClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_index(self) -> RegistryIndex:
        response = self._get(self._registry_url)
        return parse_registry_index(response.text, self._registry_url)

    def fetch_manifest(self, manifest_url: str) -> RepositoryManifest:
        response = self._get(manifest_url)
        return parse_repository_manifest(response.text, manifest_url)

    def fetch_file(self, base_url: str, relative_path: str) -> bytes:
        url = join_url(base_url, relative_path)
        response = self._request(url)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise RemoteFileNotFoundError(url)
        self._raise_for_status(url, response)
        return response.content

    def file_exists(self, base_url: str, relative_path: str) -> bool:
        url = join_url(base_url, relative_path)
        try:
            # Stream so the probe never downloads the body.
            with self._client.stream("GET", url, timeout=self._probe_timeout) as response:
                exists = response.status_code == httpx.codes.OK
        except httpx.HTTPError as e:
            logger.debug("Probe of %s failed: %s", url, e)
            return False
        logger.debug("Probe of %s: %s", url, "found" if exists else "absent")
        return exists

    def list_directory(self, listing_url: str) -> list[RemoteEntry]:
        response = self._get(listing_url, headers={"Accept": "application/vnd.github+json"})
        try:
            return _ENTRY_LIST.validate_json(response.content)
        except ValidationError as e:
            reason = f"not a directory listing: {e.error_count()} error(s)"
            raise SchemaError(listing_url, reason) from e

    def _request(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            return self._client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise NetworkError(url, str(e) or type(e).__name__) from e

    def _get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        response = self._request(url, headers=headers)
        self._raise_for_status(url, response)
        return response

    def _raise_for_status(self, url: str, response: httpx.Response) -> None:
        if not response.is_success:
            raise NetworkError(url, response.reason_phrase, status_code=response.status_code)
