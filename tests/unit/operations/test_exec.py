"""Tests for running installed cli-command packages."""

import sys
from pathlib import Path

import pytest

from tests.builders import install_record
from vpkg.errors import EntryPointNotFoundError, InvalidPackageKindError, NotInstalledError
from vpkg.integrations.process.fake import FakeProcessRunner
from vpkg.operations.exec import entry_command, exec_package


def test_entry_command_picks_runner_by_suffix(tmp_path: Path) -> None:
    assert entry_command(tmp_path / "cmd/main.go", ["-v"]) == [
        "go",
        "run",
        str(tmp_path / "cmd/main.go"),
        "-v",
    ]
    assert entry_command(tmp_path / "main.py", []) == [sys.executable, str(tmp_path / "main.py")]
    assert entry_command(tmp_path / "bin/tool", ["x"]) == [str(tmp_path / "bin/tool"), "x"]


def test_exec_runs_default_entry_point(make_context, project: Path) -> None:
    runner = FakeProcessRunner(exit_codes={"main.go": 3})
    ctx = make_context(process_runner=runner)
    package_dir = install_record(ctx.install_root, "acme/migrate", type="cli-command")
    (package_dir / "cmd").mkdir()
    (package_dir / "cmd" / "main.go").write_text("package main\n", encoding="utf-8")

    result = exec_package(ctx, "acme/migrate", ["up", "--steps", "2"])

    assert result.returncode == 3
    assert runner.calls == [
        (("go", "run", str(package_dir / "cmd" / "main.go"), "up", "--steps", "2"), project)
    ]


def test_exec_uses_declared_entry(make_context) -> None:
    runner = FakeProcessRunner()
    ctx = make_context(process_runner=runner)
    package_dir = install_record(
        ctx.install_root, "acme/migrate", type="cli-command", entry="tool.py"
    )
    (package_dir / "tool.py").write_text("print('hi')\n", encoding="utf-8")

    result = exec_package(ctx, "acme/migrate", [])

    assert result.success
    assert runner.calls[0][0] == (sys.executable, str(package_dir / "tool.py"))


def test_exec_not_installed(ctx) -> None:
    with pytest.raises(NotInstalledError):
        exec_package(ctx, "acme/migrate", [])


def test_exec_rejects_library_modules(ctx) -> None:
    install_record(ctx.install_root, "acme/cache")

    with pytest.raises(InvalidPackageKindError) as exc_info:
        exec_package(ctx, "acme/cache", [])

    assert exc_info.value.kind == "library-module"


def test_exec_missing_entry_point(ctx) -> None:
    install_record(ctx.install_root, "acme/migrate", type="cli-command")

    with pytest.raises(EntryPointNotFoundError) as exc_info:
        exec_package(ctx, "acme/migrate", [])

    assert exc_info.value.entry_path.name == "main.go"
