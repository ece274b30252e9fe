import logging

import click

from vpkg.config import DEBUG_ENV, env_flag
from vpkg.context import VpkgContext, create_context
from vpkg.error_boundary import cli_error_boundary
from vpkg.output import user_output
from vpkg.version import __version__

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

# Track whether commands are registered
_commands_registered = False


class LazyGroup(click.Group):
    """Click Group that lazily loads commands."""

    def list_commands(self, ctx):
        """List available commands, registering them if needed."""
        if not _commands_registered:
            _register_commands()
        return super().list_commands(ctx)

    def get_command(self, ctx, cmd_name):
        """Get a command by name, registering if needed."""
        if not _commands_registered:
            _register_commands()
        return super().get_command(ctx, cmd_name)


def _configure_logging(debug: bool) -> None:
    if debug or env_flag(DEBUG_ENV):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.command(cls=LazyGroup, invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Log debug output, including HTTP requests")
@click.option(
    "--registry",
    "registry_url",
    default=None,
    help="Registry index URL (overrides vpkg.toml and VPKG_REGISTRY_URL)",
)
@click.option("--quiet", "-q", is_flag=True, help="Only show results, warnings and errors")
@click.pass_context
@cli_error_boundary
def cli(ctx: click.Context, debug: bool, registry_url: str | None, quiet: bool) -> None:
    """Install templated packages from a vpkg registry."""
    _configure_logging(debug)

    if ctx.obj is None:
        vpkg_ctx = create_context(registry_url=registry_url, quiet=quiet)
        ctx.obj = vpkg_ctx
        ctx.call_on_close(vpkg_ctx.registry.close)

    if ctx.invoked_subcommand is None:
        user_output(ctx.get_help())


def get_context(ctx: click.Context) -> VpkgContext:
    """The VpkgContext created by the root group."""
    return ctx.find_object(VpkgContext)


def _register_commands() -> None:
    """Register all commands with the CLI group."""
    global _commands_registered

    if _commands_registered:
        return

    from vpkg.commands.add import add
    from vpkg.commands.exec import exec_command
    from vpkg.commands.installed import installed
    from vpkg.commands.list import list_packages
    from vpkg.commands.remove import remove
    from vpkg.commands.sync import sync

    cli.add_command(add)
    cli.add_command(add, name="install")
    cli.add_command(remove)
    cli.add_command(list_packages)
    cli.add_command(installed)
    cli.add_command(exec_command)
    cli.add_command(sync)

    _commands_registered = True


def main() -> None:
    """Entry point with error boundary."""
    cli_error_boundary(cli)()
