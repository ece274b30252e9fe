"""Application context with dependency injection.

VpkgContext holds every collaborator an operation needs (registry client,
process runner, clock, feedback, configuration, project root). It is created
once per command invocation by create_context() and passed explicitly to
every operation; nothing in vpkg keeps a default client as module state.
"""

from dataclasses import dataclass
from pathlib import Path

from vpkg.config import VpkgConfig, load_config
from vpkg.feedback import InteractiveFeedback, SuppressedFeedback, UserFeedback
from vpkg.integrations.clock import Clock
from vpkg.integrations.process import ProcessRunner
from vpkg.integrations.registry import RegistryClient
from vpkg.io.installed import InstalledPackageIndex


@dataclass(frozen=True)
class VpkgContext:
    """Immutable context holding all dependencies for vpkg operations.

    Attributes:
        registry: Client for the registry index, manifests and package files
        process_runner: Runs sync providers and cli-command entry points
        clock: Source of install timestamps and backup suffixes
        feedback: User-facing progress messages
        config: Effective configuration
        project_root: Directory packages are installed into
    """

    registry: RegistryClient
    process_runner: ProcessRunner
    clock: Clock
    feedback: UserFeedback
    config: VpkgConfig
    project_root: Path

    @property
    def install_root(self) -> Path:
        return self.config.install_root_path(self.project_root)

    def installed_index(self) -> InstalledPackageIndex:
        """Scan the install root. Call once per operation and query the result."""
        return InstalledPackageIndex.scan(self.install_root)

    @staticmethod
    def for_test(
        registry: RegistryClient | None = None,
        process_runner: ProcessRunner | None = None,
        clock: Clock | None = None,
        feedback: UserFeedback | None = None,
        config: VpkgConfig | None = None,
        project_root: Path | None = None,
    ) -> "VpkgContext":
        """Create test context with fakes for every unspecified collaborator.

        Example:
            >>> registry = FakeRegistryClient(index=index, manifests=manifests)
            >>> ctx = VpkgContext.for_test(registry=registry, project_root=tmp_path)
        """
        from vpkg.feedback import RecordingFeedback
        from vpkg.integrations.clock.fake import FakeClock
        from vpkg.integrations.process.fake import FakeProcessRunner
        from vpkg.integrations.registry.fake import FakeRegistryClient

        resolved_registry: RegistryClient = (
            registry if registry is not None else FakeRegistryClient()
        )
        resolved_runner: ProcessRunner = (
            process_runner if process_runner is not None else FakeProcessRunner()
        )
        resolved_clock: Clock = clock if clock is not None else FakeClock()
        resolved_feedback: UserFeedback = feedback if feedback is not None else RecordingFeedback()
        resolved_config = config if config is not None else VpkgConfig()
        resolved_root = project_root if project_root is not None else Path("/fake/project")

        return VpkgContext(
            registry=resolved_registry,
            process_runner=resolved_runner,
            clock=resolved_clock,
            feedback=resolved_feedback,
            config=resolved_config,
            project_root=resolved_root,
        )


def create_context(
    *,
    project_root: Path | None = None,
    registry_url: str | None = None,
    quiet: bool = False,
) -> VpkgContext:
    """Create production context with real implementations.

    Called once at CLI entry point. The project root defaults to the current
    working directory.

    Raises:
        ValueError: If the project's vpkg.toml is malformed
    """
    from vpkg.integrations.clock.real import RealClock
    from vpkg.integrations.process.real import RealProcessRunner
    from vpkg.integrations.registry.real import RealRegistryClient

    root = project_root if project_root is not None else Path.cwd()
    config = load_config(root, registry_url=registry_url)
    feedback: UserFeedback = SuppressedFeedback() if quiet else InteractiveFeedback()

    return VpkgContext(
        registry=RealRegistryClient(
            config.registry_url,
            content_timeout=config.content_timeout,
            probe_timeout=config.probe_timeout,
        ),
        process_runner=RealProcessRunner(),
        clock=RealClock(),
        feedback=feedback,
        config=config,
        project_root=root,
    )
