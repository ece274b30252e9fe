"""Tests for template discovery strategies."""

import pytest

from tests.builders import (
    ACME_BASE_URL,
    ACME_LISTING_URL,
    ACME_MANIFEST_URL,
    make_descriptor,
    make_manifest,
    make_repository,
)
from vpkg.integrations.registry.abc import RemoteEntry
from vpkg.integrations.registry.fake import FakeRegistryClient
from vpkg.models.registry import RepositoryRef
from vpkg.operations.discovery import (
    TEMPLATE_SUFFIXES,
    ProbeStrategy,
    TreeWalkStrategy,
    discover_templates,
    github_location,
    strip_template_suffix,
)
from vpkg.operations.resolve import ResolvedPackage

PLAIN_MANIFEST_URL = "https://packages.example.org/vpkg/meta.yaml"
PLAIN_BASE_URL = "https://packages.example.org/vpkg"


def _resolved(repository: RepositoryRef, **descriptor_overrides) -> ResolvedPackage:
    descriptor = make_descriptor("acme/redis-cache", **descriptor_overrides)
    return ResolvedPackage(
        repository=repository, descriptor=descriptor, manifest=make_manifest(descriptor)
    )


def _acme() -> ResolvedPackage:
    return _resolved(make_repository("acme", ACME_MANIFEST_URL))


@pytest.mark.parametrize("suffix", TEMPLATE_SUFFIXES)
def test_strip_template_suffix_removes_each_suffix(suffix: str) -> None:
    assert strip_template_suffix(f"service.go{suffix}") == "service.go"
    assert strip_template_suffix(f"handler{suffix}") == "handler"
    assert strip_template_suffix(f"cmd/main.go{suffix}") == "cmd/main.go"


def test_strip_template_suffix_keeps_static_files() -> None:
    assert strip_template_suffix("README.md") == "README.md"
    assert strip_template_suffix("tmpl/notes.txt") == "tmpl/notes.txt"


def test_github_location_from_raw_manifest_url() -> None:
    resolved = _resolved(
        make_repository("acme", "https://raw.githubusercontent.com/acme/pkgs/v2/sub/dir/meta.yaml")
    )

    location = github_location(resolved)

    assert location is not None
    assert (location.owner, location.repo, location.ref, location.directory) == (
        "acme",
        "pkgs",
        "v2",
        "sub/dir",
    )


def test_github_location_from_repository_url() -> None:
    repository = RepositoryRef.model_validate(
        {
            "name": "acme",
            "repository": "https://github.com/acme/pkgs.git",
            "meta_url": PLAIN_MANIFEST_URL,
        }
    )

    location = github_location(_resolved(repository))

    assert location is not None
    assert (location.owner, location.repo, location.ref) == ("acme", "pkgs", "main")


def test_github_location_none_for_other_hosts() -> None:
    assert github_location(_resolved(make_repository("plain", PLAIN_MANIFEST_URL))) is None


def test_tree_walk_recurses_into_directories() -> None:
    registry = FakeRegistryClient(
        listings={
            ACME_LISTING_URL: [
                RemoteEntry(name="main.go.tmpl", type="file"),
                RemoteEntry(name="cmd", type="dir", url="https://api.test/cmd"),
            ],
            "https://api.test/cmd": [
                RemoteEntry(name="root.go.gotmpl", type="file"),
                RemoteEntry(name="assets", type="dir", url="https://api.test/cmd/assets"),
            ],
            "https://api.test/cmd/assets": [RemoteEntry(name="logo.png", type="file")],
        }
    )

    files = TreeWalkStrategy().discover(registry, _acme())

    assert files == ("cmd/assets/logo.png", "cmd/root.go.gotmpl", "main.go.tmpl")


def test_tree_walk_stops_at_max_depth() -> None:
    registry = FakeRegistryClient(
        listings={
            ACME_LISTING_URL: [
                RemoteEntry(name="a.tmpl", type="file"),
                RemoteEntry(name="one", type="dir", url="https://api.test/1"),
            ],
            "https://api.test/1": [
                RemoteEntry(name="b.tmpl", type="file"),
                RemoteEntry(name="two", type="dir", url="https://api.test/2"),
            ],
        }
    )

    files = TreeWalkStrategy(max_depth=2).discover(registry, _acme())

    assert files == ("a.tmpl", "one/b.tmpl")
    assert "https://api.test/2" not in registry.listed_urls


def test_tree_walk_failure_finds_nothing() -> None:
    registry = FakeRegistryClient(
        listings={
            ACME_LISTING_URL: [
                RemoteEntry(name="a.tmpl", type="file"),
                RemoteEntry(name="one", type="dir", url="https://api.test/1"),
            ],
        },
        failing_urls={"https://api.test/1"},
    )

    assert TreeWalkStrategy().discover(registry, _acme()) == ()


def test_tree_walk_skips_hosts_without_listing_api() -> None:
    registry = FakeRegistryClient()

    resolved = _resolved(make_repository("p", PLAIN_MANIFEST_URL))

    files = TreeWalkStrategy().discover(registry, resolved)

    assert files == ()
    assert registry.listed_urls == []


def test_probe_candidates_include_short_name_variants() -> None:
    candidates = ProbeStrategy().candidates(_acme())

    assert "redis-cache.go.tmpl" in candidates
    assert "rediscache.go.gotmpl" in candidates
    assert "internal/service.go.templ" in candidates
    assert len(candidates) == len(set(candidates))


def test_probe_keeps_existing_candidates() -> None:
    registry = FakeRegistryClient(
        files={
            f"{PLAIN_BASE_URL}/templates/main.go.tmpl": b"",
            f"{PLAIN_BASE_URL}/templates/cmd/main.go.gotmpl": b"",
        }
    )

    files = ProbeStrategy().discover(registry, _resolved(make_repository("p", PLAIN_MANIFEST_URL)))

    assert files == ("main.go.tmpl", "cmd/main.go.gotmpl")


def test_successful_tree_walk_never_probes() -> None:
    registry = FakeRegistryClient(
        files={f"{ACME_BASE_URL}/templates/main.go.tmpl": b""},
        listings={ACME_LISTING_URL: [RemoteEntry(name="client.go.tmpl", type="file")]},
    )

    outcome = discover_templates(registry, _acme())

    assert outcome.found
    assert outcome.strategy == "tree-walk"
    assert outcome.files == ("client.go.tmpl",)
    assert registry.probed_urls == []


def test_failed_tree_walk_falls_back_to_probing() -> None:
    registry = FakeRegistryClient(
        files={f"{ACME_BASE_URL}/templates/main.go.tmpl": b""},
        failing_urls={ACME_LISTING_URL},
    )

    outcome = discover_templates(registry, _acme())

    assert outcome.strategy == "probe"
    assert outcome.files == ("main.go.tmpl",)


def test_nothing_found_by_any_strategy() -> None:
    registry = FakeRegistryClient(listings={ACME_LISTING_URL: []})

    outcome = discover_templates(registry, _acme())

    assert not outcome.found
    assert outcome.strategy is None
    assert outcome.files == ()
