"""Compile command: concatenate fragments in dependency order."""

from __future__ import annotations

import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path

import click

from ..errors import DeporderError, OutputError
from ..graph import DependencyGraph
from ..models import GatherResult
from ..render import DEFAULT_TEMPLATE, TIMED_TEMPLATE, Compiler, Template, get_template
from ..settings import Settings
from ..staleness import is_up_to_date
from .common import fail, load_graph, root_argument, workers_option

logger = logging.getLogger(__name__)


def compile_to_file(
    out_path: Path, template: Template, graph: DependencyGraph, result: GatherResult
) -> int:
    """Compile into a temporary sibling of ``out_path`` and swap it in on success.

    On any failure the temporary file is removed and ``out_path`` is left as
    it was, so a failed run never looks up to date to the next one.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{out_path.name}.", suffix=".tmp", dir=out_path.parent
        )
    except OSError as exc:
        raise OutputError.wrap(out_path, exc) from exc
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            count = Compiler(template, fh).compile(graph, result.sources)
        if out_path.exists():
            shutil.copymode(out_path, tmp_path)
        os.replace(tmp_path, out_path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise OutputError.wrap(out_path, exc) from exc
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return count


@click.command("compile")
@root_argument
@click.option(
    "--out",
    "out_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout). Left untouched when newer than every source.",
)
@click.option("--timed", is_flag=True, help="Report the run time of each fragment")
@workers_option
@click.pass_obj
def compile_cmd(
    settings: Settings,
    root: Path,
    out_path: Path | None,
    timed: bool,
    workers: int | None,
):
    """Concatenate the fragments under ROOT (default: .) in dependency order.

    Each fragment may declare, in its leading comment block:

        # before: other_fragment
        # after: base_fragment
    """
    root = root.expanduser().resolve()
    if out_path is not None:
        out_path = out_path.expanduser()
    graph, result = load_graph(root, settings, workers)
    template = get_template(TIMED_TEMPLATE if timed else DEFAULT_TEMPLATE)

    try:
        if out_path is None:
            sys.stdout.flush()
            count = Compiler(template, sys.stdout.buffer).compile(graph, result.sources)
            sys.stdout.buffer.flush()
        elif is_up_to_date(out_path, result.mtime):
            logger.info("%s is up to date", out_path)
            return
        else:
            count = compile_to_file(out_path, template, graph, result)
    except DeporderError as err:
        fail(err)
    logger.info("Wrote %d fragments", count)


__all__ = ["compile_cmd", "compile_to_file"]
