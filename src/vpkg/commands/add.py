"""Add command for installing packages."""

from pathlib import Path

import click

from vpkg.cli import get_context
from vpkg.error_boundary import cli_error_boundary
from vpkg.models.installation import InstallOptions, InstallReceipt
from vpkg.operations.install import display_path, install_package
from vpkg.progress import (
    FeedbackPresenter,
    RichProgressPresenter,
    run_with_progress,
    should_use_rich_progress,
)


@click.command()
@click.argument("specifier")
@click.option(
    "--dest",
    "-d",
    "destination",
    default=None,
    help="Install into this directory (must be under the install root)",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing installation")
@click.option("--dry-run", is_flag=True, help="Show what would be installed without writing")
@click.option("--version", "version", default=None, help="Install a specific version")
@click.pass_context
@cli_error_boundary
def add(
    ctx: click.Context,
    specifier: str,
    destination: str | None,
    force: bool,
    dry_run: bool,
    version: str | None,
) -> None:
    """Install a package from the registry.

    SPECIFIER is namespace/short-name, optionally with @version.

    Examples:

        # Install the latest version
        vpkg add acme/cache

        # Pin a version and choose the destination
        vpkg add acme/cache@1.2.0 --dest vpkg/internal/cache
    """
    vpkg_ctx = get_context(ctx)
    options = InstallOptions(destination=destination, force=force, dry_run=dry_run, version=version)

    if dry_run or not should_use_rich_progress():
        presenter = FeedbackPresenter(vpkg_ctx.feedback)
        receipt = install_package(vpkg_ctx, specifier, options, listener=presenter.update)
    else:
        receipt = run_with_progress(
            lambda listener, cancel: install_package(
                vpkg_ctx, specifier, options, listener=listener, cancel=cancel
            ),
            RichProgressPresenter(),
        )

    _print_receipt(receipt, vpkg_ctx.project_root)


def _print_receipt(receipt: InstallReceipt, project_root: Path) -> None:
    location = display_path(project_root, receipt.destination)
    if receipt.dry_run:
        click.echo(f"Would install {receipt.package_name} v{receipt.version} to {location}:")
        for path in receipt.files:
            click.echo(f"  {display_path(project_root, path)}")
        return

    click.echo(f"✓ Installed {receipt.package_name} v{receipt.version}")
    click.echo(f"  Location: {location}")
    click.echo(f"  Files: {len(receipt.files)}")
    click.echo("")
    click.echo(receipt.usage)
