"""Order command: print fragment names in dependency order."""

from __future__ import annotations

from pathlib import Path

import click

from ..errors import DependencyCycleError
from ..ordering import ordered_names
from ..settings import Settings
from .common import fail, load_graph, root_argument, workers_option


@click.command("order")
@root_argument
@workers_option
@click.pass_obj
def order_cmd(settings: Settings, root: Path, workers: int | None):
    """Print the names under ROOT (default: .) one per line, in order."""
    graph, _ = load_graph(root.expanduser().resolve(), settings, workers)
    try:
        for name in ordered_names(graph):
            click.echo(name)
    except DependencyCycleError as err:
        fail(err)


__all__ = ["order_cmd"]
