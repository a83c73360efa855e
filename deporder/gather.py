"""Concurrent discovery of ordering declarations.

Each source is scanned by its own asyncio task: the file is stat'ed and its
header parsed in a worker thread, and the resulting signals are handed over a
bounded queue to a single merge coroutine. The merge coroutine is the only
code that touches the :class:`~deporder.graph.DependencyGraph` while the
pipeline runs, so the graph needs no locking.

Signals
=======
* :class:`~deporder.models.TimestampSignal` - folded into the newest mtime.
* :class:`~deporder.models.RelationSignal` - one per declared relation.
* :class:`~deporder.models.FreeSignal` - a source declared nothing.

Source failures are collected rather than raised so that every in-flight
worker finishes and the queue is drained before returning. The first
failure is reported in :attr:`GatherResult.error`; whatever the successful
sources contributed stays in the graph.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .errors import SourceAccessError
from .extract import Extractor, extract_relations, extract_relations_from
from .graph import DependencyGraph
from .models import (
    FreeSignal,
    GatherResult,
    RelationSignal,
    Signal,
    Source,
    TimestampSignal,
)
from .sources import iter_sources

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 10


async def _merge(
    graph: DependencyGraph,
    queue: asyncio.Queue[Signal | None],
    result: GatherResult,
) -> None:
    while (signal := await queue.get()) is not None:
        match signal:
            case RelationSignal(name=name, relation=relation):
                graph.declare_relation(name, relation)
            case FreeSignal(name=name):
                graph.declare_free(name)
            case TimestampSignal(mtime=mtime):
                result.mtime = max(result.mtime, mtime)


async def _scan(
    source: Source,
    queue: asyncio.Queue[Signal | None],
    extractor: Extractor,
    limiter: asyncio.Semaphore | None,
    errors: list[SourceAccessError],
) -> None:
    async with limiter or contextlib.nullcontext():
        try:
            st = await asyncio.to_thread(os.stat, source.path)
            await queue.put(TimestampSignal(st.st_mtime))
            relations = await asyncio.to_thread(
                extract_relations_from, source.path, extractor
            )
        except OSError as exc:
            err = SourceAccessError.wrap(source.path, exc)
            logger.warning("Cannot read source %r: %s", source.name, err)
            errors.append(err)
            return

    if not relations:
        await queue.put(FreeSignal(source.name))
        return
    for relation in relations:
        await queue.put(RelationSignal(source.name, relation))


async def gather_into(
    graph: DependencyGraph,
    sources: Iterable[Source],
    *,
    extractor: Extractor = extract_relations,
    max_workers: int | None = None,
    queue_size: int = DEFAULT_QUEUE_SIZE,
) -> GatherResult:
    """Scan ``sources`` concurrently and merge their declarations into ``graph``.

    Parameters
    ----------
    graph : DependencyGraph
        Store to populate. It must not be used elsewhere until this returns.
    sources : Iterable[Source]
        Sources to scan. If iteration raises :class:`SourceAccessError`,
        enumeration stops and that error is reported.
    extractor : callable
        ``lines -> list[Relation]``; called from worker threads with the
        opened source.
    max_workers : int | None
        Maximum number of sources scanned at once (``None`` = unbounded).
    queue_size : int
        Capacity of the signal queue; producers wait when it is full.
    """
    queue: asyncio.Queue[Signal | None] = asyncio.Queue(maxsize=queue_size)
    limiter = asyncio.Semaphore(max_workers) if max_workers else None
    result = GatherResult()
    errors: list[SourceAccessError] = []
    tasks: list[asyncio.Task[None]] = []

    merger = asyncio.create_task(_merge(graph, queue, result))
    try:
        for source in sources:
            result.sources.setdefault(source.name, source.path)
            tasks.append(
                asyncio.create_task(_scan(source, queue, extractor, limiter, errors))
            )
    except SourceAccessError as exc:
        logger.warning("Source enumeration failed: %s", exc)
        errors.append(exc)
    finally:
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        await queue.put(None)
        await merger

    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome

    if errors:
        result.error = errors[0]
    logger.debug(
        "Gathered %d sources (%d failed), newest mtime %s",
        len(tasks),
        len(errors),
        result.mtime,
    )
    return result


def gather_sources(
    graph: DependencyGraph, root: str | Path, **kwargs
) -> GatherResult:
    """Synchronous entry point: enumerate ``root`` and gather into ``graph``."""
    return asyncio.run(gather_into(graph, iter_sources(root), **kwargs))


__all__ = ["DEFAULT_QUEUE_SIZE", "gather_into", "gather_sources"]
