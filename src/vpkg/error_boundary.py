"""Error boundary handling for CLI commands.

Decorator that catches well-known exceptions at CLI entry points and
displays a clean message instead of a stack trace.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import click

from vpkg.errors import VpkgError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Callable[..., Any])


def _fail(e: Exception) -> None:
    logger.debug("Command failed", exc_info=e)
    click.echo(f"Error: {e}", err=True)
    raise SystemExit(1) from None


def cli_error_boundary(func: T) -> T:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - VpkgError: Every engine failure (network, schema, not found, conflicts ...)
        - FileExistsError: File/directory conflicts
        - FileNotFoundError: Missing files/directories
        - ValueError: Invalid input or configuration
        - PermissionError: Permission denied errors

    All other exceptions bubble up normally with full stack traces. With
    --debug the caught exception's traceback is logged as well.

    Example:
        @click.command()
        @cli_error_boundary
        def my_command():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except VpkgError as e:
            _fail(e)
        except FileExistsError as e:
            _fail(e)
        except FileNotFoundError as e:
            _fail(e)
        except ValueError as e:
            _fail(e)
        except PermissionError as e:
            _fail(e)

    return wrapper  # type: ignore[return-value]
