"""Incremental dependency graph with deterministic topological extraction.

:class:`DependencyGraph` is Kahn's algorithm run online: edges are absorbed
one at a time, in any order, while the set of ready nodes is kept current.
Nodes are then pulled with :meth:`DependencyGraph.next` until the store is
empty.

Extraction rule
===============
* If any constrained node is ready (it has edges but no unresolved
  prerequisite), the lexicographically smallest ready node is returned.
* Otherwise the lexicographically smallest free node (one that never had an
  edge) is returned.
* Otherwise ``None``.

The final order therefore depends only on the set of declared edges and
free names, never on the order in which they were declared. A cycle shows up
as nodes that never become ready; :meth:`DependencyGraph.residual_edges`
exposes what is left for reporting.

The graph is not thread-safe. All mutation is expected to come from a single
owner (see :mod:`deporder.gather`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .models import Node, Relation

logger = logging.getLogger(__name__)


class DependencyGraph:
    def __init__(self) -> None:
        # prerequisite -> dependents (dict used as an insertion-ordered set)
        self._forward: dict[Node, dict[Node, None]] = {}
        # dependent -> unresolved prerequisites
        self._reverse: dict[Node, set[Node]] = {}
        self._ready: set[Node] = set()
        self._free: set[Node] = set()

    # Introspection -----------------------------------------------------------
    @property
    def ready(self) -> frozenset[Node]:
        return frozenset(self._ready)

    @property
    def free(self) -> frozenset[Node]:
        return frozenset(self._free)

    def __len__(self) -> int:
        nodes = set(self._forward) | set(self._reverse) | self._ready | self._free
        for deps in self._forward.values():
            nodes.update(deps)
        return len(nodes)

    def _has_edges(self, name: Node) -> bool:
        return name in self._forward or name in self._reverse or name in self._ready

    # Insertion ---------------------------------------------------------------
    def declare_free(self, name: Node) -> None:
        """Record ``name`` as unconstrained unless it already has an edge."""
        if self._has_edges(name):
            logger.debug("Ignoring free declaration of constrained node %r", name)
            return
        self._free.add(name)

    def declare_relation(self, name: Node, relation: Relation) -> None:
        """Insert the edge that ``relation`` declares on behalf of ``name``."""
        self.add_edge(*relation.edge(name))

    def add_edge(self, prerequisite: Node, dependent: Node) -> None:
        a, b = prerequisite, dependent
        logger.debug("Adding edge %r -> %r", a, b)
        self._free.discard(a)
        self._free.discard(b)
        self._forward.setdefault(a, {})[b] = None
        self._reverse.setdefault(b, set()).add(a)
        self._ready.discard(b)
        if self._reverse.get(a):
            self._ready.discard(a)
        else:
            self._ready.add(a)

    # Extraction --------------------------------------------------------------
    def next(self) -> Node | None:
        """Remove and return the next node in order, or ``None`` when empty."""
        if self._ready:
            name = min(self._ready)
            self._remove(name)
            return name
        if self._free:
            name = min(self._free)
            self._free.remove(name)
            return name
        return None

    def drain(self) -> Iterator[Node]:
        while (name := self.next()) is not None:
            yield name

    def _remove(self, a: Node) -> None:
        dependents = self._forward.pop(a, {})
        self._ready.discard(a)
        self._free.discard(a)
        for b in dependents:
            pending = self._reverse.get(b)
            if pending is None:
                continue
            pending.discard(a)
            if not pending:
                del self._reverse[b]
                self._ready.add(b)

    # Cycle report ------------------------------------------------------------
    def has_unresolved_edges(self) -> bool:
        """True if edges remain; after a full drain this indicates a cycle."""
        return bool(self._forward)

    def residual_edges(self) -> dict[Node, list[Node]]:
        return {a: list(deps) for a, deps in self._forward.items()}


__all__ = ["DependencyGraph"]
