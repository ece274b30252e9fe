"""Tests for listing available and installed packages."""

from tests.builders import (
    install_record,
    make_descriptor,
    make_index,
    make_manifest,
    make_repository,
)
from vpkg.feedback import RecordingFeedback
from vpkg.integrations.registry.fake import FakeRegistryClient
from vpkg.models.installation import ListFilter
from vpkg.operations.listing import list_available, list_installed

FIRST_URL = "https://first.example.test/meta.yaml"
SECOND_URL = "https://second.example.test/meta.yaml"


def _registry(**kwargs) -> FakeRegistryClient:
    return FakeRegistryClient(
        index=make_index(
            make_repository("first", FIRST_URL), make_repository("second", SECOND_URL)
        ),
        **kwargs,
    )


def _manifests() -> dict:
    return {
        FIRST_URL: make_manifest(
            make_descriptor("acme/cache", tags=["cache", "redis"]),
            make_descriptor("acme/migrate", type="cli-command", tags=["database"]),
        ),
        SECOND_URL: make_manifest(make_descriptor("tools/auth", tags=["auth"])),
    }


def test_list_available_in_registry_order(make_context) -> None:
    ctx = make_context(registry=_registry(manifests=_manifests()))

    packages = list_available(ctx)

    assert [p.descriptor.name for p in packages] == ["acme/cache", "acme/migrate", "tools/auth"]
    assert packages[2].repository.name == "second"


def test_tag_filter_matches_any_tag(make_context) -> None:
    ctx = make_context(registry=_registry(manifests=_manifests()))

    packages = list_available(ctx, ListFilter(tags=["redis", "auth"]))

    assert [p.descriptor.name for p in packages] == ["acme/cache", "tools/auth"]


def test_kind_filter(make_context) -> None:
    ctx = make_context(registry=_registry(manifests=_manifests()))

    packages = list_available(ctx, ListFilter(kind="cli-command"))

    assert [p.descriptor.name for p in packages] == ["acme/migrate"]


def test_unreachable_repository_is_reported_and_skipped(make_context) -> None:
    manifests = _manifests()
    ctx = make_context(registry=_registry(manifests=manifests, failing_urls={FIRST_URL}))

    packages = list_available(ctx)

    assert [p.descriptor.name for p in packages] == ["tools/auth"]
    assert isinstance(ctx.feedback, RecordingFeedback)
    levels = [level for level, _ in ctx.feedback.messages]
    assert levels == ["warning"]
    assert "first" in ctx.feedback.messages[0][1]


def test_list_installed_is_ordered_by_path(ctx) -> None:
    install_record(ctx.install_root, "tools/auth")
    install_record(ctx.install_root, "acme/cache", version="2.0.0")

    records = list_installed(ctx)

    assert [(r.name, r.version) for r in records] == [
        ("acme/cache", "2.0.0"),
        ("tools/auth", "1.0.0"),
    ]


def test_list_installed_without_install_root(ctx) -> None:
    assert list_installed(ctx) == []
