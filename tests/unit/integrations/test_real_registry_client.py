"""Tests for RealRegistryClient against an httpx.MockTransport."""

import httpx
import pytest

from vpkg.errors import NetworkError, RemoteFileNotFoundError, SchemaError
from vpkg.integrations.registry.real import RealRegistryClient

REGISTRY_URL = "https://registry.example.test/registry.yaml"
BASE_URL = "https://repo.example.test/vpkg"

INDEX_YAML = """\
repositories:
  - name: acme
    meta_url: https://repo.example.test/vpkg/meta.yaml
"""


def _client(handler) -> RealRegistryClient:
    return RealRegistryClient(REGISTRY_URL, transport=httpx.MockTransport(handler))


def test_fetch_index_parses_document() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == REGISTRY_URL
        return httpx.Response(200, text=INDEX_YAML)

    with _client(handler) as client:
        index = client.fetch_index()

    assert index.repositories[0].manifest_url == f"{BASE_URL}/meta.yaml"


def test_requests_identify_the_client() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["User-Agent"])
        return httpx.Response(200, text=INDEX_YAML)

    with _client(handler) as client:
        client.fetch_index()

    assert seen[0].startswith("vpkg/")


def test_fetch_index_non_2xx_raises_network_error() -> None:
    with _client(lambda request: httpx.Response(503)) as client:
        with pytest.raises(NetworkError) as exc_info:
            client.fetch_index()

    assert exc_info.value.status_code == 503
    assert exc_info.value.url == REGISTRY_URL


def test_fetch_manifest_malformed_raises_schema_error() -> None:
    with _client(lambda request: httpx.Response(200, text="packages: {")) as client:
        with pytest.raises(SchemaError) as exc_info:
            client.fetch_manifest(f"{BASE_URL}/meta.yaml")

    assert exc_info.value.source == f"{BASE_URL}/meta.yaml"


def test_fetch_manifest_keeps_valid_packages_next_to_invalid_ones() -> None:
    text = (
        "packages:\n"
        "  - name: cache\n    type: library-module\n"
        "  - name: acme/queue\n    type: library-module\n"
    )

    with _client(lambda request: httpx.Response(200, text=text)) as client:
        manifest = client.fetch_manifest(f"{BASE_URL}/meta.yaml")

    assert manifest.find("acme/queue") is not None
    assert len(manifest.packages) == 1


def test_transport_failure_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(NetworkError, match="connection refused"):
            client.fetch_manifest(f"{BASE_URL}/meta.yaml")


def test_fetch_file_returns_bytes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == f"{BASE_URL}/templates/main.go.tmpl"
        return httpx.Response(200, content=b"package {{ short_name }}\n")

    with _client(handler) as client:
        content = client.fetch_file(BASE_URL, "templates/main.go.tmpl")

    assert content == b"package {{ short_name }}\n"


def test_fetch_file_404_raises_remote_file_not_found() -> None:
    with _client(lambda request: httpx.Response(404)) as client:
        with pytest.raises(RemoteFileNotFoundError) as exc_info:
            client.fetch_file(BASE_URL, "templates/missing.go")

    assert exc_info.value.url == f"{BASE_URL}/templates/missing.go"


def test_fetch_file_server_error_is_not_treated_as_missing() -> None:
    with _client(lambda request: httpx.Response(500)) as client:
        with pytest.raises(NetworkError) as exc_info:
            client.fetch_file(BASE_URL, "templates/main.go.tmpl")

    assert not isinstance(exc_info.value, RemoteFileNotFoundError)
    assert exc_info.value.status_code == 500


def test_file_exists_reflects_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("main.go.tmpl"):
            return httpx.Response(200, content=b"x")
        return httpx.Response(404)

    with _client(handler) as client:
        assert client.file_exists(BASE_URL, "templates/main.go.tmpl") is True
        assert client.file_exists(BASE_URL, "templates/service.go.tmpl") is False


def test_file_exists_transport_failure_counts_as_absent() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with _client(handler) as client:
        assert client.file_exists(BASE_URL, "templates/main.go.tmpl") is False


def test_list_directory_parses_entries() -> None:
    listing_url = "https://api.github.com/repos/acme/pkgs/contents/templates?ref=main"

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Accept"] == "application/vnd.github+json"
        return httpx.Response(
            200,
            json=[
                {"name": "main.go.tmpl", "type": "file", "url": "https://api/x", "size": 10},
                {"name": "cmd", "type": "dir", "url": "https://api/cmd"},
            ],
        )

    with _client(handler) as client:
        entries = client.list_directory(listing_url)

    assert [(entry.name, entry.type) for entry in entries] == [
        ("main.go.tmpl", "file"),
        ("cmd", "dir"),
    ]
    assert entries[1].url == "https://api/cmd"


def test_list_directory_non_list_raises_schema_error() -> None:
    with _client(lambda request: httpx.Response(200, json={"message": "Not Found"})) as client:
        with pytest.raises(SchemaError):
            client.list_directory("https://api.github.com/repos/acme/pkgs/contents/x")
