"""Data model for dependency ordering.

A node is identified by its name alone. Ordering declarations are captured
as :class:`Relation` records (direction + target) attached to the naming
item, and normalized into a single ``prerequisite -> dependent`` edge when
they reach the graph.

Example declarations (shell comment header of a fragment named ``path.sh``)::

    # after: env.sh
    # before: prompt.sh

yield ``env.sh -> path.sh`` and ``path.sh -> prompt.sh``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import SourceAccessError

Node = str


class Direction(str, Enum):
    BEFORE = "before"
    AFTER = "after"

    def __str__(self) -> str:
        return self.value


class Relation(BaseModel):
    """A directed ordering constraint declared by an item against ``target``."""

    model_config = ConfigDict(frozen=True)

    direction: Direction
    target: Node

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Relation target must be a non-empty name")
        return v

    def edge(self, name: Node) -> tuple[Node, Node]:
        """Return the normalized ``(prerequisite, dependent)`` pair."""
        if self.direction is Direction.BEFORE:
            return name, self.target
        return self.target, name


@dataclass(frozen=True)
class Source:
    name: Node
    path: Path


# Signals delivered from gather workers to the merge point ------------------
@dataclass(frozen=True)
class RelationSignal:
    name: Node
    relation: Relation


@dataclass(frozen=True)
class FreeSignal:
    name: Node


@dataclass(frozen=True)
class TimestampSignal:
    mtime: float


Signal = RelationSignal | FreeSignal | TimestampSignal


@dataclass
class GatherResult:
    """Aggregate outcome of a gather run.

    ``mtime`` is the newest modification time seen across sources (POSIX
    seconds, ``0.0`` when nothing was stat'ed). ``error`` is the first source
    access failure, if any. ``sources`` maps node names to the files they
    were read from.
    """

    mtime: float = 0.0
    error: SourceAccessError | None = None
    sources: dict[Node, Path] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = [
    "Node",
    "Direction",
    "Relation",
    "Source",
    "RelationSignal",
    "FreeSignal",
    "TimestampSignal",
    "Signal",
    "GatherResult",
]
