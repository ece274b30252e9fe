"""Tests for VpkgContext construction."""

from pathlib import Path

import pytest

from vpkg.config import VpkgConfig
from vpkg.context import VpkgContext, create_context
from vpkg.feedback import InteractiveFeedback, RecordingFeedback, SuppressedFeedback
from vpkg.integrations.clock.fake import FakeClock
from vpkg.integrations.registry.fake import FakeRegistryClient
from vpkg.integrations.registry.real import RealRegistryClient


def test_for_test_fills_in_fakes() -> None:
    ctx = VpkgContext.for_test()

    assert isinstance(ctx.registry, FakeRegistryClient)
    assert isinstance(ctx.clock, FakeClock)
    assert isinstance(ctx.feedback, RecordingFeedback)
    assert ctx.install_root == Path("/fake/project/vpkg")


def test_install_root_follows_config(tmp_path: Path) -> None:
    ctx = VpkgContext.for_test(config=VpkgConfig(install_root="pkg"), project_root=tmp_path)

    assert ctx.install_root == tmp_path / "pkg"
    assert len(ctx.installed_index()) == 0


def test_create_context_uses_real_registry(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("VPKG_REGISTRY_URL", raising=False)

    ctx = create_context(project_root=tmp_path, registry_url="https://r.example.test/r.yaml")

    try:
        assert isinstance(ctx.registry, RealRegistryClient)
        assert isinstance(ctx.feedback, InteractiveFeedback)
        assert ctx.config.registry_url == "https://r.example.test/r.yaml"
        assert ctx.project_root == tmp_path
    finally:
        ctx.registry.close()


def test_create_context_quiet_suppresses_feedback(tmp_path: Path) -> None:
    ctx = create_context(project_root=tmp_path, quiet=True)

    try:
        assert isinstance(ctx.feedback, SuppressedFeedback)
    finally:
        ctx.registry.close()
