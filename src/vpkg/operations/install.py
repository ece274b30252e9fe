"""Package installation.

An install resolves the package, decides the destination, discovers the
template files, fetches them all, renders everything into a staging directory
and only then moves the result into place and writes the metadata record. A
failure while fetching or rendering therefore leaves the destination untouched.
"""

import logging
import shutil
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

from vpkg.context import VpkgContext
from vpkg.errors import (
    AlreadyExistsError,
    DestinationOutsideInstallRootError,
    FilesystemError,
    InstallCancelledError,
    NoTemplatesError,
)
from vpkg.io.installed import metadata_path, save_record
from vpkg.models.installation import (
    InstalledPackageRecord,
    InstallOptions,
    InstallReceipt,
    RenderContext,
)
from vpkg.operations.discovery import (
    DiscoveryStrategy,
    default_strategies,
    discover_templates,
    is_template,
    strip_template_suffix,
)
from vpkg.operations.receipt import build_usage
from vpkg.operations.render import (
    TemplateRenderer,
    build_render_context,
    detect_module_identifier,
)
from vpkg.operations.resolve import ResolvedPackage, resolve_package
from vpkg.progress import ProgressEvent, ProgressListener, ProgressStep

logger = logging.getLogger(__name__)


def default_destination(install_root: Path, package_name: str) -> Path:
    """Conventional location of a package: <install_root>/<namespace>/<short-name>."""
    namespace, short_name = package_name.split("/")
    return install_root / namespace / short_name


def resolve_destination(
    ctx: VpkgContext, resolved: ResolvedPackage, options: InstallOptions
) -> Path:
    """Explicit override, then the descriptor's hint, then the conventional path.

    Relative paths are taken relative to the project root. The result is not
    checked here; see check_destination().
    """
    if options.destination:
        chosen = Path(options.destination)
    elif resolved.descriptor.destination_hint:
        chosen = Path(resolved.descriptor.destination_hint)
    else:
        return default_destination(ctx.install_root, resolved.name)

    if chosen.is_absolute():
        return chosen
    return ctx.project_root / chosen


def check_destination(ctx: VpkgContext, package_name: str, destination: Path) -> None:
    """Require destination to lie strictly under the install root.

    Only directories under the install root are found by the installed
    package index, so anything installed elsewhere could not be listed,
    removed, synced or executed afterwards.

    Raises:
        DestinationOutsideInstallRootError: If destination is the install root
            itself or lies outside it
    """
    install_root = ctx.install_root.resolve()
    resolved = destination.resolve()
    if resolved == install_root or not resolved.is_relative_to(install_root):
        raise DestinationOutsideInstallRootError(package_name, destination, ctx.install_root)


def display_path(project_root: Path, path: Path) -> str:
    """path relative to the project root when it lies inside it."""
    if path.is_relative_to(project_root):
        return path.relative_to(project_root).as_posix()
    return path.as_posix()


def has_contents(path: Path) -> bool:
    """True when path is a file or a non-empty directory."""
    if not path.exists():
        return False
    if not path.is_dir():
        return True
    return any(path.iterdir())


@dataclass(frozen=True)
class _StagedFile:
    source: str
    output: str


class _Reporter:
    def __init__(self, listener: ProgressListener | None) -> None:
        self._listener = listener

    def emit(self, step: ProgressStep, fraction: float, description: str, **counters: int) -> None:
        if self._listener is None:
            return
        self._listener(
            ProgressEvent(step=step, fraction=fraction, description=description, **counters)
        )

    def fail(self, step: ProgressStep, error: Exception) -> None:
        if self._listener is None:
            return
        self._listener(
            ProgressEvent(step=step, fraction=0.0, description="failed", error=str(error))
        )


def install_package(
    ctx: VpkgContext,
    specifier: str,
    options: InstallOptions,
    *,
    listener: ProgressListener | None = None,
    cancel: threading.Event | None = None,
    strategies: list[DiscoveryStrategy] | None = None,
) -> InstallReceipt:
    """Install a package into the project.

    Args:
        ctx: Context for this invocation
        specifier: ``namespace/short-name[@version]``
        options: Destination override, force, dry-run and version options
        listener: Optional receiver of ordered progress events
        cancel: Optional event checked between files; once set the install
            stops before anything is moved into place
        strategies: Discovery strategies to use instead of the defaults

    Raises:
        InvalidSpecifierError, PackageNotFoundError, NetworkError, SchemaError:
            From resolution; nothing on disk has been touched
        DestinationOutsideInstallRootError: If the destination does not lie under
            the install root; nothing on disk has been touched
        AlreadyExistsError: If the destination has content and force is not set
        NoTemplatesError: If discovery found no files
        RenderError, RemoteFileNotFoundError: If a file fails to fetch or render;
            the destination is left untouched
        InstallCancelledError: If cancel was set before the commit
        FilesystemError: If writing into the destination fails
    """
    reporter = _Reporter(listener)
    step = ProgressStep.DISCOVERY
    try:
        reporter.emit(step, 0.0, f"Resolving {specifier}")
        resolved = resolve_package(ctx.registry, specifier, version=options.version)

        destination = resolve_destination(ctx, resolved, options)
        check_destination(ctx, resolved.name, destination)
        if has_contents(destination) and not options.force:
            raise AlreadyExistsError(resolved.name, destination)

        render_context = build_render_context(
            specifier,
            resolved,
            module_identifier=detect_module_identifier(ctx.project_root),
            destination_path=display_path(ctx.project_root, destination),
            timestamp=ctx.clock.now(),
        )

        reporter.emit(step, 0.5, f"Discovering files of {resolved.name}")
        if strategies is None:
            strategies = default_strategies(ctx.config.discovery_max_depth)
        outcome = discover_templates(ctx.registry, resolved, strategies)
        if not outcome.found:
            raise NoTemplatesError(resolved.name, resolved.descriptor.templates_root)
        reporter.emit(step, 1.0, f"Found {len(outcome.files)} file(s) via {outcome.strategy}")

        staged = _plan_outputs(outcome.files)
        usage = build_usage(resolved.descriptor, render_context)

        if options.dry_run:
            files = [destination / item.output for item in staged]
            logger.debug("Dry run for %s: %d file(s) planned", resolved.name, len(files))
            return InstallReceipt(
                package_name=resolved.name,
                version=resolved.version,
                kind=resolved.descriptor.kind,
                destination=destination,
                files=files,
                usage=usage,
                dry_run=True,
            )

        step = ProgressStep.DOWNLOAD
        contents = _download(ctx, resolved, staged, reporter, cancel)

        with tempfile.TemporaryDirectory(prefix="vpkg-staging-") as staging_dir:
            staging = Path(staging_dir)
            step = ProgressStep.RENDER
            _render_into(staging, resolved.name, render_context, staged, contents, reporter, cancel)

            if cancel is not None and cancel.is_set():
                raise InstallCancelledError(resolved.name)

            step = ProgressStep.INSTALL
            reporter.emit(step, 0.0, f"Installing into {render_context.destination_path}")
            files = _commit(staging, staged, destination)

        record = InstalledPackageRecord(
            name=resolved.name,
            version=resolved.version,
            installed_at=ctx.clock.now(),
            path=render_context.destination_path,
            kind=resolved.descriptor.kind,
            meta=resolved.descriptor,
        )
        save_record(destination, record)
        reporter.emit(step, 1.0, f"Installed {resolved.name}")
        logger.debug("Installed %s (%d files) at %s", resolved.name, len(files), destination)

    except Exception as e:
        reporter.fail(step, e)
        raise

    return InstallReceipt(
        package_name=resolved.name,
        version=resolved.version,
        kind=resolved.descriptor.kind,
        destination=destination,
        files=files,
        usage=usage,
        record=record,
    )


def _plan_outputs(files: tuple[str, ...]) -> list[_StagedFile]:
    planned: dict[str, _StagedFile] = {}
    for path in files:
        output = strip_template_suffix(path)
        if output in planned:
            logger.warning(
                "Skipping %s: %s already produces %s", path, planned[output].source, output
            )
            continue
        planned[output] = _StagedFile(source=path, output=output)
    return list(planned.values())


def _download(
    ctx: VpkgContext,
    resolved: ResolvedPackage,
    staged: list[_StagedFile],
    reporter: _Reporter,
    cancel: threading.Event | None,
) -> list[bytes]:
    """Fetch every planned file, in plan order."""
    root = resolved.descriptor.templates_root
    total = len(staged)
    contents: list[bytes] = []

    for processed, item in enumerate(staged):
        if cancel is not None and cancel.is_set():
            raise InstallCancelledError(resolved.name)

        reporter.emit(
            ProgressStep.DOWNLOAD,
            processed / total,
            f"Fetching {item.source}",
            total_files=total,
            processed=processed,
        )
        remote_path = f"{root}/{item.source}" if root else item.source
        contents.append(ctx.registry.fetch_file(resolved.base_url, remote_path))

    reporter.emit(
        ProgressStep.DOWNLOAD, 1.0, f"Fetched {total} file(s)", total_files=total, processed=total
    )
    return contents


def _render_into(
    staging: Path,
    package_name: str,
    render_context: RenderContext,
    staged: list[_StagedFile],
    contents: list[bytes],
    reporter: _Reporter,
    cancel: threading.Event | None,
) -> None:
    """Render templates and copy static files into the staging directory."""
    renderer = TemplateRenderer(render_context)
    total = len(staged)

    for processed, (item, content) in enumerate(zip(staged, contents, strict=True)):
        if cancel is not None and cancel.is_set():
            raise InstallCancelledError(package_name)

        if is_template(item.source):
            description = f"Rendering {item.source}"
            content = renderer.render(item.source, content)
        else:
            description = f"Copying {item.source}"
        reporter.emit(
            ProgressStep.RENDER,
            processed / total,
            description,
            total_files=total,
            processed=processed,
        )

        target = _inside(staging, item.output)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise FilesystemError("write", target, str(e)) from e

    reporter.emit(
        ProgressStep.RENDER, 1.0, f"Prepared {total} file(s)", total_files=total, processed=total
    )


def _commit(staging: Path, staged: list[_StagedFile], destination: Path) -> list[Path]:
    """Move staged files into the destination, replacing existing files."""
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError("create directory", destination, str(e)) from e

    installed: list[Path] = []
    for item in staged:
        source = staging / item.output
        target = _inside(destination, item.output)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if target.is_dir():
                shutil.rmtree(target)
            shutil.move(source, target)
        except OSError as e:
            raise FilesystemError("write", target, str(e)) from e
        installed.append(target)
    return installed


def _inside(root: Path, relative: str) -> Path:
    """Join root and relative, refusing paths that would escape root."""
    target = root / relative
    if not target.resolve().is_relative_to(root.resolve()) or target == metadata_path(root):
        raise FilesystemError("write", target, "path is outside the package directory")
    return target
