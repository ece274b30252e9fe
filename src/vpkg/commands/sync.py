"""Sync command for running the sync capabilities of installed packages."""

import click

from vpkg.cli import get_context
from vpkg.error_boundary import cli_error_boundary
from vpkg.operations.sync import run_sync_capabilities


@click.command()
@click.pass_context
@cli_error_boundary
def sync(ctx: click.Context) -> None:
    """Run every installed package's sync provider.

    Stops at the first provider that fails.
    """
    vpkg_ctx = get_context(ctx)
    report = run_sync_capabilities(vpkg_ctx)

    for name in report.executed:
        click.echo(f"✓ Synced {name}")

    if report.failure is not None:
        click.echo(f"Error: Sync failed for {report.failure.package_name}", err=True)
        click.echo(f"  {report.failure.cause}", err=True)
        raise SystemExit(1)

    if len(report.executed) == 0:
        click.echo("No installed packages provide a sync capability")
