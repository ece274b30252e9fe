"""Registry client abstraction.

All network access of the engine goes through this interface: the registry
index, repository manifests, package files, existence probes and directory
listings. A client is constructed by the caller and threaded through every
operation of one command invocation.
"""

from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel, ConfigDict

from vpkg.models.registry import RegistryIndex, RepositoryManifest


class RemoteEntry(BaseModel):
    """One item of a directory-listing API response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    type: Literal["file", "dir", "symlink", "submodule"]
    url: str = ""


def join_url(base_url: str, relative_path: str) -> str:
    """Join a base URL and a relative path with exactly one slash."""
    if not relative_path:
        return base_url.rstrip("/")
    return f"{base_url.rstrip('/')}/{relative_path.lstrip('/')}"


class RegistryClient(ABC):
    """Abstract interface for registry and repository access."""

    @property
    @abstractmethod
    def registry_url(self) -> str:
        """URL of the registry index this client reads."""
        ...

    @abstractmethod
    def fetch_index(self) -> RegistryIndex:
        """Fetch and parse the registry index.

        Raises:
            NetworkError: If the index is unreachable or answers non-2xx
            SchemaError: If the index document is malformed
        """
        ...

    @abstractmethod
    def fetch_manifest(self, manifest_url: str) -> RepositoryManifest:
        """Fetch and parse one repository manifest.

        Raises:
            NetworkError: If the manifest is unreachable or answers non-2xx
            SchemaError: If the manifest document is malformed
        """
        ...

    @abstractmethod
    def fetch_file(self, base_url: str, relative_path: str) -> bytes:
        """Fetch the bytes of a repository file.

        Raises:
            RemoteFileNotFoundError: If the repository answers 404
            NetworkError: On transport failure or any other non-2xx status
        """
        ...

    @abstractmethod
    def file_exists(self, base_url: str, relative_path: str) -> bool:
        """Probe whether a repository file exists using the short probe timeout.

        Transport failures count as "does not exist".
        """
        ...

    @abstractmethod
    def list_directory(self, listing_url: str) -> list[RemoteEntry]:
        """Fetch one directory listing from a directory-listing API.

        Raises:
            NetworkError: If the API is unreachable or answers non-2xx
            SchemaError: If the response is not a list of entries
        """
        ...

    def close(self) -> None:
        """Release network resources. The client must not be used afterwards."""
