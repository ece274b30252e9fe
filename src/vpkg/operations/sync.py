"""Running the sync capabilities of installed packages."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from vpkg.context import VpkgContext
from vpkg.integrations.process import ProcessResult
from vpkg.io.installed import InstalledPackage
from vpkg.models.registry import SyncSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncFailure:
    """The provider that stopped a sync run."""

    package_name: str
    cause: str
    result: ProcessResult | None = None


@dataclass(frozen=True)
class SyncReport:
    """Outcome of running every sync capability.

    executed lists the packages whose provider succeeded, in run order.
    failure is set when a provider failed; later providers did not run.
    """

    executed: list[str] = field(default_factory=list)
    failure: SyncFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def sync_command(package_dir: Path, spec: SyncSpec) -> list[str]:
    """``[*runner, <provider path>, *args]``; the provider alone when there is no runner."""
    provider = package_dir / spec.provider
    return [*spec.runner, str(provider), *spec.args]


def find_sync_capabilities(ctx: VpkgContext) -> list[InstalledPackage]:
    """Installed packages declaring a sync capability, ordered by path."""
    return [
        entry for entry in ctx.installed_index().entries if entry.record.meta.has_sync_capability
    ]


def run_sync_capabilities(ctx: VpkgContext) -> SyncReport:
    """Run each installed package's sync provider, stopping at the first failure.

    Providers run with the project root as working directory and their output
    goes straight to the terminal.
    """
    executed: list[str] = []
    for entry in find_sync_capabilities(ctx):
        spec = entry.record.meta.sync
        if spec is None:
            continue

        provider = entry.directory / spec.provider
        if not provider.is_file():
            cause = f"Sync provider {spec.provider} not found in {entry.directory}"
            return SyncReport(executed=executed, failure=SyncFailure(entry.name, cause))

        ctx.feedback.info(f"Syncing {entry.name}...")
        result = ctx.process_runner.run(sync_command(entry.directory, spec), cwd=ctx.project_root)
        if not result.success:
            logger.debug("Sync provider of %s failed: %s", entry.name, result.describe_failure())
            failure = SyncFailure(entry.name, result.describe_failure(), result)
            return SyncReport(executed=executed, failure=failure)

        executed.append(entry.name)

    return SyncReport(executed=executed)
