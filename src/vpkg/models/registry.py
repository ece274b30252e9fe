"""Registry, repository manifest and package descriptor models.

These mirror the YAML documents served by a registry. Wire field names
(``registry_url``, ``meta_url``, ``type``, ``templates`` ...) are kept as
aliases so documents round-trip unchanged; Python code uses the descriptive
attribute names.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PackageKind = Literal["library-module", "cli-command"]

SYNC_CAPABILITY = "sync-integration"

# Older registries describe library modules by the DI framework they target.
_KIND_ALIASES = {"fx-module": "library-module"}


def _coerce_str(value: Any) -> Any:
    """YAML turns `version: 1.0` into a float; keep versions as text."""
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    if value is None:
        return ""
    return value


def _coerce_list(value: Any) -> Any:
    if value is None:
        return []
    return value


class Tag(BaseModel):
    """Category tag declared by the registry index."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""


class RepositoryRef(BaseModel):
    """Pointer from the registry index to an independently hosted repository."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    repository_url: str = Field(default="", alias="repository")
    manifest_url: str = Field(alias="meta_url")
    author: str = ""
    verified: bool = False

    @property
    def base_url(self) -> str:
        """Repository base URL: the manifest URL minus its file name."""
        return self.manifest_url.rsplit("/", 1)[0]


class RegistryIndex(BaseModel):
    """Top-level registry document enumerating participating repositories."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: str = Field(default="", alias="version")
    index_url: str = Field(default="", alias="registry_url")
    repositories: list[RepositoryRef] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("schema_version", mode="before")
    @classmethod
    def coerce_schema_version(cls, v: Any) -> Any:
        return _coerce_str(v)

    @field_validator("repositories", "tags", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _coerce_list(v)


class SyncSpec(BaseModel):
    """How to invoke a package's sync provider.

    The provider path is relative to the installed package directory. The
    command run is ``[*runner, <provider>, *args]``; with an empty runner the
    provider itself must be executable.
    """

    model_config = ConfigDict(frozen=True)

    provider: str = ""
    runner: list[str] = Field(default_factory=list)
    args: list[str] = Field(default_factory=list)

    @field_validator("runner", "args", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _coerce_list(v)


class PackageDescriptor(BaseModel):
    """One installable package as described by a repository manifest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    title: str = ""
    description: str = ""
    kind: PackageKind = Field(alias="type")
    templates_root: str = Field(default="templates", alias="templates")
    destination_hint: str | None = Field(default=None, alias="destination")
    version: str = ""
    tags: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    license: str | None = None
    author: str | None = None
    entry: str | None = None
    capabilities: list[str] = Field(default_factory=list)
    sync: SyncSpec | None = None

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> Any:
        return _coerce_str(v)

    @field_validator("tags", "dependencies", "capabilities", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _coerce_list(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is namespace/short-name."""
        parts = v.split("/")
        if len(parts) != 2 or not all(part.strip() for part in parts):
            msg = f"Package name must be namespace/short-name: {v}"
            raise ValueError(msg)
        return v

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        """Map legacy kind names onto the supported set."""
        if isinstance(v, str):
            return _KIND_ALIASES.get(v, v)
        return v

    @field_validator("templates_root")
    @classmethod
    def validate_templates_root(cls, v: str) -> str:
        """Normalize surrounding slashes; an empty root means the repository base."""
        return v.strip("/")

    @property
    def namespace(self) -> str:
        return self.name.split("/")[0]

    @property
    def short_name(self) -> str:
        return self.name.split("/")[1]

    @property
    def has_sync_capability(self) -> bool:
        return (
            SYNC_CAPABILITY in self.capabilities
            and self.sync is not None
            and bool(self.sync.provider)
        )


class RepositoryManifest(BaseModel):
    """Per-repository document enumerating its installable packages."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: str = Field(default="", alias="version")
    repository_url: str = Field(default="", alias="repository")
    author: str = ""
    license: str = ""
    packages: list[PackageDescriptor] = Field(default_factory=list)

    @field_validator("schema_version", mode="before")
    @classmethod
    def coerce_schema_version(cls, v: Any) -> Any:
        return _coerce_str(v)

    @field_validator("packages", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _coerce_list(v)

    def find(self, name: str) -> PackageDescriptor | None:
        """Return the package with the given name, if present."""
        for package in self.packages:
            if package.name == name:
                return package
        return None
