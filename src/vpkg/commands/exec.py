"""Exec command for running installed cli-command packages."""

import click

from vpkg.cli import get_context
from vpkg.error_boundary import cli_error_boundary
from vpkg.operations.exec import exec_package


@click.command(
    name="exec",
    context_settings=dict(ignore_unknown_options=True, allow_interspersed_args=False),
)
@click.argument("name")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@cli_error_boundary
def exec_command(ctx: click.Context, name: str, args: tuple[str, ...]) -> None:
    """Run an installed cli-command package.

    Everything after NAME is passed to the package unchanged.

    Examples:

        vpkg exec acme/migrate-db status
    """
    vpkg_ctx = get_context(ctx)
    result = exec_package(vpkg_ctx, name, list(args))

    if not result.success:
        click.echo(f"Error: {name} failed: {result.describe_failure()}", err=True)
        raise SystemExit(result.returncode or 1)
