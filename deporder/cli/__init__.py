"""CLI command group for deporder.

Example usage:

        deporder compile ~/.bashrc.d --out ~/.bashrc.compiled
        deporder order ~/.bashrc.d
        deporder --log-level DEBUG compile --timed
"""

from __future__ import annotations

import click
import dotenv
from pydantic import ValidationError

from .. import __version__
from ..settings import LOG_LEVELS, Settings, configure_logging
from .compile import compile_cmd
from .order import order_cmd


def _print_version(
    ctx: click.Context, param: click.Parameter, value: bool
) -> None:  # pragma: no cover - simple utility
    """Callback to print only the raw version and exit early."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(__version__)
    ctx.exit()


@click.group()
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the deporder version and exit.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Set the logging level (env: DEPORDER_LOG_LEVEL)",
)
@click.pass_context
def deporder(ctx: click.Context, log_level: str | None):
    """Order and concatenate shell fragments by their declared dependencies."""
    dotenv.load_dotenv(".env")
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level.upper()})
    configure_logging(settings.log_level)
    ctx.obj = settings


# Register subcommands
deporder.add_command(compile_cmd)
deporder.add_command(order_cmd)

__all__ = ["deporder"]
