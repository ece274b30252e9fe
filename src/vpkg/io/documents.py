"""Parsing of registry index, repository manifest and listing documents."""

import logging
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from vpkg.errors import SchemaError
from vpkg.models.registry import PackageDescriptor, RegistryIndex, RepositoryManifest

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _load_mapping(text: str, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaError(source, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise SchemaError(source, "expected a mapping at the document root")
    return data


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def _validate(model: type[M], data: dict[str, Any], source: str) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SchemaError(source, _describe(e)) from e


def parse_registry_index(text: str, source: str) -> RegistryIndex:
    """Parse a registry index document.

    Args:
        text: Raw YAML (or JSON) text
        source: URL or path the text came from, for error messages

    Raises:
        SchemaError: If the text is not a well-formed registry index
    """
    return _validate(RegistryIndex, _load_mapping(text, source), source)


def parse_repository_manifest(text: str, source: str) -> RepositoryManifest:
    """Parse a repository manifest document.

    Each package entry is validated on its own. An invalid entry is logged and
    left out so the rest of the repository stays installable.

    Raises:
        SchemaError: If the text is not a well-formed manifest
    """
    data = _load_mapping(text, source)
    entries = data.get("packages")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise SchemaError(source, "packages: expected a list")

    packages: list[PackageDescriptor] = []
    for position, entry in enumerate(entries):
        try:
            packages.append(PackageDescriptor.model_validate(entry))
        except ValidationError as e:
            name = entry.get("name") if isinstance(entry, dict) else None
            logger.warning(
                "Skipping package %s in %s: %s", name or f"#{position}", source, _describe(e)
            )

    return _validate(RepositoryManifest, {**data, "packages": packages}, source)
