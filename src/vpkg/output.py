"""Output helper for human-facing messages.

Command results go to stdout through click.echo; progress, warnings and
errors meant for a person go to stderr through user_output().
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Print a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)
