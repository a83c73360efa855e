"""Dependency-safe iteration over a populated graph.

Wraps :meth:`DependencyGraph.drain` so callers get names in order and a
:class:`DependencyCycleError` once the graph is exhausted with edges left
over. Names already yielded before the error form a valid partial order,
but the run as a whole should be treated as failed.
"""

from __future__ import annotations

from collections.abc import Iterator

from .errors import DependencyCycleError, OrderingError
from .graph import DependencyGraph
from .models import Node


def ordered_names(graph: DependencyGraph) -> Iterator[Node]:
    """Yield node names until the graph is empty, then check for a cycle."""
    yield from graph.drain()
    if graph.has_unresolved_edges():
        raise DependencyCycleError(graph.residual_edges())


def order(graph: DependencyGraph) -> list[Node]:
    """Return the complete order (raises on a cycle, discarding the prefix)."""
    return list(ordered_names(graph))


__all__ = [
    "OrderingError",
    "DependencyCycleError",
    "ordered_names",
    "order",
]
