"""Remove command for uninstalling packages."""

import click

from vpkg.cli import get_context
from vpkg.error_boundary import cli_error_boundary
from vpkg.operations.install import display_path
from vpkg.operations.remove import remove_package


@click.command()
@click.argument("name")
@click.option("--backup", is_flag=True, help="Keep the package as a timestamped backup")
@click.pass_context
@cli_error_boundary
def remove(ctx: click.Context, name: str, backup: bool) -> None:
    """Remove an installed package.

    Examples:

        # Delete the package directory
        vpkg remove acme/cache

        # Rename it to acme/cache.backup.<timestamp> instead
        vpkg remove acme/cache --backup
    """
    vpkg_ctx = get_context(ctx)
    result = remove_package(vpkg_ctx, name, backup=backup)

    if result.backup_path is not None:
        backup_location = display_path(vpkg_ctx.project_root, result.backup_path)
        click.echo(f"✓ Removed {result.package_name} (backup: {backup_location})")
    else:
        location = display_path(vpkg_ctx.project_root, result.path)
        click.echo(f"✓ Removed {result.package_name} from {location}")
