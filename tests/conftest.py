"""Shared fixtures: an in-memory acme registry and an isolated project directory."""

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.builders import (
    ACME_BASE_URL,
    ACME_LISTING_URL,
    ACME_MANIFEST_URL,
    CLIENT_TEMPLATE,
    README,
    make_descriptor,
    make_index,
    make_manifest,
    make_repository,
)
from vpkg.context import VpkgContext
from vpkg.integrations.clock.fake import FakeClock
from vpkg.integrations.process.fake import FakeProcessRunner
from vpkg.integrations.registry.abc import RemoteEntry
from vpkg.integrations.registry.fake import FakeRegistryClient


@pytest.fixture
def acme_registry() -> FakeRegistryClient:
    """Registry with one GitHub-hosted repository exposing acme/cache.

    The package's template root holds client.go.tmpl and README.md, served
    both as files and through the directory-listing API.
    """
    return FakeRegistryClient(
        index=make_index(make_repository("acme", ACME_MANIFEST_URL)),
        manifests={ACME_MANIFEST_URL: make_manifest(make_descriptor())},
        files={
            f"{ACME_BASE_URL}/templates/client.go.tmpl": CLIENT_TEMPLATE,
            f"{ACME_BASE_URL}/templates/README.md": README,
        },
        listings={
            ACME_LISTING_URL: [
                RemoteEntry(name="client.go.tmpl", type="file"),
                RemoteEntry(name="README.md", type="file"),
            ]
        },
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    (root / "go.mod").write_text("module example.com/shop\n\ngo 1.22\n", encoding="utf-8")
    return root


@pytest.fixture
def make_context(project: Path) -> Callable[..., VpkgContext]:
    """Factory for contexts rooted at the project fixture."""

    def factory(
        registry: FakeRegistryClient | None = None,
        process_runner: FakeProcessRunner | None = None,
        clock: FakeClock | None = None,
    ) -> VpkgContext:
        return VpkgContext.for_test(
            registry=registry,
            process_runner=process_runner,
            clock=clock,
            project_root=project,
        )

    return factory


@pytest.fixture
def ctx(make_context: Callable[..., VpkgContext], acme_registry: FakeRegistryClient) -> VpkgContext:
    return make_context(registry=acme_registry)
