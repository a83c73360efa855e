"""Exception hierarchy for deporder.

Errors are raised where they are detected and only turned into exit codes by
the command-line layer.
"""

from __future__ import annotations

from pathlib import Path


class DeporderError(Exception):
    """Base class for all deporder errors."""


class PathError(DeporderError):
    """A filesystem operation on ``path`` failed.

    The underlying ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, path: str | Path | None, message: str):
        self.path = Path(path) if path is not None else None
        super().__init__(message)

    @classmethod
    def wrap(cls, path: str | Path | None, exc: OSError):
        reason = exc.strerror or str(exc)
        target = path if path is not None else exc.filename
        err = cls(target, f"{target}: {reason}")
        err.__cause__ = exc
        return err


class SourceAccessError(PathError):
    """A source could not be enumerated, opened, read, or stat'ed."""


class OutputError(PathError):
    """The compiled output could not be checked, written, or replaced."""


class OrderingError(DeporderError, RuntimeError):
    """Raised when nodes cannot be fully ordered."""


class DependencyCycleError(OrderingError):
    """Raised after a full drain when unresolved edges remain.

    ``edges`` maps each residual prerequisite to its remaining dependents.
    """

    def __init__(self, edges: dict[str, list[str]]):
        self.edges = edges
        super().__init__(
            "dependency cycle detected:\n" + format_edges(edges)
        )


def format_edges(edges: dict[str, list[str]]) -> str:
    return "\n".join(
        f"  {name} -> {', '.join(deps)}" for name, deps in sorted(edges.items())
    )


__all__ = [
    "DeporderError",
    "PathError",
    "SourceAccessError",
    "OutputError",
    "OrderingError",
    "DependencyCycleError",
    "format_edges",
]
