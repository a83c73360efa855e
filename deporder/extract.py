"""Relation extraction from fragment headers.

Declarations are shell comments of the form::

    # before: other_fragment.sh
    # after: base.sh

Only the first contiguous block of declaration lines is considered. Lines
before it are skipped; the first non-matching line after it ends the header.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from pathlib import Path

from .models import Direction, Relation

DECLARATION_PATTERN = re.compile(r"^\s*#\s*(before|after):\s+(.+?)\s*$")

# Takes the lines of one source; must not share mutable state between calls.
Extractor = Callable[[Iterable[str]], list[Relation]]


def extract_relations(lines: Iterable[str]) -> list[Relation]:
    relations: list[Relation] = []
    for line in lines:
        match = DECLARATION_PATTERN.match(line.rstrip("\r\n"))
        if match is None:
            if relations:
                break
            continue
        direction, target = match.groups()
        relations.append(Relation(direction=Direction(direction), target=target))
    return relations


def extract_relations_from(
    path: str | Path, extractor: Extractor = extract_relations
) -> list[Relation]:
    """Open ``path`` and run ``extractor`` over its lines."""
    with open(path, encoding="utf-8", errors="replace") as fh:
        return extractor(fh)


__all__ = ["DECLARATION_PATTERN", "Extractor", "extract_relations", "extract_relations_from"]
