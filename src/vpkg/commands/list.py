"""List command for showing packages available in the registry."""

import click

from vpkg.cli import get_context
from vpkg.error_boundary import cli_error_boundary
from vpkg.models.installation import ListFilter
from vpkg.operations.listing import list_available


@click.command(name="list")
@click.option("--tag", "-t", "tags", multiple=True, help="Only packages with this tag (repeatable)")
@click.option(
    "--type",
    "kind",
    type=click.Choice(["library-module", "cli-command"]),
    default=None,
    help="Only packages of this type",
)
@click.pass_context
@cli_error_boundary
def list_packages(ctx: click.Context, tags: tuple[str, ...], kind: str | None) -> None:
    """List packages available in the registry."""
    vpkg_ctx = get_context(ctx)
    packages = list_available(vpkg_ctx, ListFilter(tags=list(tags), kind=kind))

    if len(packages) == 0:
        click.echo("No packages found")
        return

    click.echo(f"Available packages ({len(packages)}):\n")
    for package in packages:
        descriptor = package.descriptor
        version = descriptor.version or "-"
        line = (
            f"  {descriptor.name:<30} {version:<10} "
            f"{descriptor.kind:<15} {package.repository.name}"
        )
        click.echo(line)
        if descriptor.description:
            click.echo(f"      {descriptor.description}")
