"""Tests for the library API on local-only operations."""

from pathlib import Path

import pytest

from tests.builders import install_record
from vpkg.api import installed_packages, remove, run_sync_capabilities
from vpkg.errors import NotInstalledError


def test_installed_packages_reads_project(tmp_path: Path) -> None:
    install_record(tmp_path / "vpkg", "acme/cache", version="1.2.0")

    records = installed_packages(tmp_path)

    assert [(r.name, r.version) for r in records] == [("acme/cache", "1.2.0")]


def test_remove_with_backup(tmp_path: Path) -> None:
    package_dir = install_record(tmp_path / "vpkg", "acme/cache")

    result = remove(tmp_path, "acme/cache", backup=True)

    assert result.backup_path is not None
    assert result.backup_path.is_dir()
    assert not package_dir.exists()
    assert installed_packages(tmp_path) == []


def test_remove_missing_package(tmp_path: Path) -> None:
    with pytest.raises(NotInstalledError):
        remove(tmp_path, "acme/cache")


def test_sync_with_nothing_installed(tmp_path: Path) -> None:
    report = run_sync_capabilities(tmp_path)

    assert report.ok
    assert report.executed == []
