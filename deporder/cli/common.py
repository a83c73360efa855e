"""Helpers shared by the CLI subcommands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import click

from ..errors import DeporderError
from ..gather import gather_sources
from ..graph import DependencyGraph
from ..models import GatherResult
from ..settings import Settings

logger = logging.getLogger(__name__)


def fail(err: DeporderError) -> NoReturn:
    """Report ``err`` on stderr and exit with status 1."""
    click.echo(f"error: {err}", err=True)
    raise SystemExit(1)


def load_graph(
    root: Path, settings: Settings, workers: int | None = None
) -> tuple[DependencyGraph, GatherResult]:
    """Gather ``root`` into a fresh graph, exiting on a source access error."""
    graph = DependencyGraph()
    result = gather_sources(
        graph,
        root,
        max_workers=workers or settings.max_workers,
        queue_size=settings.queue_size,
    )
    if result.error is not None:
        fail(result.error)
    logger.debug("Loaded %d nodes from %s", len(graph), root)
    return graph, result


workers_option = click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of sources scanned at once (env: DEPORDER_MAX_WORKERS)",
)

root_argument = click.argument(
    "root",
    required=False,
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
)


__all__ = ["fail", "load_graph", "workers_option", "root_argument"]
