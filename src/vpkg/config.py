"""Configuration for vpkg.

Values come from, in increasing precedence: built-in defaults, an optional
``vpkg.toml`` at the project root, the VPKG_REGISTRY_URL environment
variable, and finally explicit overrides passed by the CLI.

Example vpkg.toml:
  registry_url = "https://example.com/registry.yaml"
  install_root = "internal/vpkg"

  [timeouts]
  content = 30.0
  probe = 5.0
"""

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_REGISTRY_URL = (
    "https://raw.githubusercontent.com/alfariiizi/vpkg-registry/main/registry.yaml"
)
CONFIG_FILENAME = "vpkg.toml"

REGISTRY_URL_ENV = "VPKG_REGISTRY_URL"
DEBUG_ENV = "VPKG_DEBUG"
FORCE_TUI_ENV = "VPKG_FORCE_TUI"


@dataclass(frozen=True)
class VpkgConfig:
    """Effective configuration for one command invocation."""

    registry_url: str = DEFAULT_REGISTRY_URL
    install_root: str = "vpkg"
    content_timeout: float = 30.0
    probe_timeout: float = 5.0
    discovery_max_depth: int = 3

    def install_root_path(self, project_root: Path) -> Path:
        root = Path(self.install_root)
        if root.is_absolute():
            return root
        return project_root / root


def env_flag(name: str) -> bool:
    """True when the environment variable is set to a truthy value."""
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def load_config(project_root: Path, *, registry_url: str | None = None) -> VpkgConfig:
    """Load configuration for the project at project_root.

    Args:
        project_root: Directory that may contain vpkg.toml
        registry_url: Explicit registry override (highest precedence)

    Raises:
        ValueError: If vpkg.toml exists but is not valid TOML or has wrong types
    """
    config = _load_file(project_root / CONFIG_FILENAME)

    env_registry = os.environ.get(REGISTRY_URL_ENV)
    if env_registry:
        config = replace(config, registry_url=env_registry)

    if registry_url:
        config = replace(config, registry_url=registry_url)

    return config


def _load_file(cfg_path: Path) -> VpkgConfig:
    if not cfg_path.exists():
        return VpkgConfig()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {cfg_path}: {e}") from e

    defaults = VpkgConfig()
    timeouts = data.get("timeouts", {})
    if not isinstance(timeouts, dict):
        raise ValueError(f"Invalid {cfg_path}: [timeouts] must be a table")

    try:
        return VpkgConfig(
            registry_url=str(data.get("registry_url", defaults.registry_url)),
            install_root=str(data.get("install_root", defaults.install_root)),
            content_timeout=float(timeouts.get("content", defaults.content_timeout)),
            probe_timeout=float(timeouts.get("probe", defaults.probe_timeout)),
            discovery_max_depth=int(data.get("discovery_max_depth", defaults.discovery_max_depth)),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid {cfg_path}: {e}") from e
