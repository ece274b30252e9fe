"""Error taxonomy for vpkg operations.

Every error raised by the engine derives from VpkgError so the CLI error
boundary (and library callers) can present it without a stack trace. Each
error keeps the identity (package name, URL, path) needed to retry narrowly.
"""

from pathlib import Path


class VpkgError(Exception):
    """Base class for all vpkg errors."""


class NetworkError(VpkgError):
    """Raised when a registry, repository or file is unreachable or answers non-2xx."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            message = f"Request to {url} failed with status {status_code}"
        else:
            message = f"Request to {url} failed: {reason}"
        super().__init__(message)


class SchemaError(VpkgError):
    """Raised when a document does not parse into the expected structure."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed document at {source}: {reason}")


class NotFoundError(VpkgError):
    """Base class for lookups that found nothing."""


class PackageNotFoundError(NotFoundError):
    """Raised when no repository in the registry provides the package."""

    def __init__(self, package_name: str, repositories_searched: int) -> None:
        self.package_name = package_name
        self.repositories_searched = repositories_searched
        super().__init__(
            f"Package {package_name} not found in any repository "
            f"({repositories_searched} searched)"
        )


class RemoteFileNotFoundError(NotFoundError):
    """Raised when a repository answers 404 for a package file."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"File not found: {url}")


class NotInstalledError(NotFoundError):
    """Raised when no installed directory matches a remove/exec target."""

    def __init__(self, package_name: str, install_root: Path) -> None:
        self.package_name = package_name
        self.install_root = install_root
        super().__init__(f"Package {package_name} is not installed under {install_root}")


class EntryPointNotFoundError(NotFoundError):
    """Raised when an installed cli-command package lacks its entry point."""

    def __init__(self, package_name: str, entry_path: Path) -> None:
        self.package_name = package_name
        self.entry_path = entry_path
        super().__init__(f"Entry point {entry_path} not found in package {package_name}")


class NoTemplatesError(VpkgError):
    """Raised when every discovery strategy came back empty."""

    def __init__(self, package_name: str, templates_root: str) -> None:
        self.package_name = package_name
        self.templates_root = templates_root
        super().__init__(f"No template files found in {templates_root} for {package_name}")


class AlreadyExistsError(VpkgError):
    """Raised when the destination is populated and force is not set."""

    def __init__(self, package_name: str, destination: Path) -> None:
        self.package_name = package_name
        self.destination = destination
        super().__init__(
            f"Package {package_name} already exists at {destination} (use --force to overwrite)"
        )


class DestinationOutsideInstallRootError(VpkgError):
    """Raised when an install destination does not lie under the install root."""

    def __init__(self, package_name: str, destination: Path, install_root: Path) -> None:
        self.package_name = package_name
        self.destination = destination
        self.install_root = install_root
        super().__init__(
            f"Cannot install {package_name} into {destination}: "
            f"destinations must lie under the install root {install_root}"
        )


class RenderError(VpkgError):
    """Raised when a template fails to parse or execute against its context."""

    def __init__(self, template_path: str, reason: str) -> None:
        self.template_path = template_path
        self.reason = reason
        super().__init__(f"Failed to render {template_path}: {reason}")


class FilesystemError(VpkgError):
    """Raised when a create/write/rename/delete on the local filesystem fails."""

    def __init__(self, operation: str, path: Path, reason: str) -> None:
        self.operation = operation
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to {operation} {path}: {reason}")


class InvalidSpecifierError(VpkgError):
    """Raised when a package specifier is not namespace/short-name[@version]."""

    def __init__(self, specifier: str) -> None:
        self.specifier = specifier
        super().__init__(
            f"Invalid package specifier '{specifier}': expected namespace/short-name[@version]"
        )


class InvalidPackageKindError(VpkgError):
    """Raised when an operation needs a different package kind."""

    def __init__(self, package_name: str, kind: str, expected: str) -> None:
        self.package_name = package_name
        self.kind = kind
        self.expected = expected
        super().__init__(
            f"Package {package_name} is a {kind} package; only {expected} packages are supported"
        )


class InstallCancelledError(VpkgError):
    """Raised when the caller cancels an install before it commits."""

    def __init__(self, package_name: str) -> None:
        self.package_name = package_name
        super().__init__(f"Installation of {package_name} was cancelled")
