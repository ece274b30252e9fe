"""Installed command for showing locally installed packages."""

import click

from vpkg.cli import get_context
from vpkg.error_boundary import cli_error_boundary
from vpkg.operations.listing import list_installed


@click.command()
@click.pass_context
@cli_error_boundary
def installed(ctx: click.Context) -> None:
    """List packages installed in the current project."""
    vpkg_ctx = get_context(ctx)
    records = list_installed(vpkg_ctx)

    if len(records) == 0:
        click.echo("No packages installed")
        return

    click.echo(f"Installed {len(records)} package(s):\n")
    for record in records:
        installed_at = record.installed_at.strftime("%Y-%m-%d %H:%M")
        click.echo(f"  {record.name:<30} {record.version:<10} {record.path:<30} {installed_at}")
