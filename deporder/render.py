"""Render ordered fragments into a single output stream.

The graph only knows names, so every fragment is reopened from its source
path at render time and written between the ``before`` and ``after`` parts
of a :class:`Template`. Templates are packaged in ``resources/templates.yml``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import BinaryIO

import yaml

from .errors import SourceAccessError
from .graph import DependencyGraph
from .models import Node
from .ordering import ordered_names

logger = logging.getLogger(__name__)

_RESOURCES_PACKAGE = "deporder.resources"
_TEMPLATES_FILENAME = "templates.yml"

DEFAULT_TEMPLATE = "default"
TIMED_TEMPLATE = "timed"
ENCODING = "utf-8"


@dataclass(frozen=True)
class Template:
    name: str
    before: str
    after: str

    def render_before(self, name: Node, path: Path) -> str:
        return self.before.format(name=name, path=path)

    def render_after(self, name: Node, path: Path) -> str:
        return self.after.format(name=name, path=path)


@lru_cache(maxsize=1)
def load_templates() -> dict[str, Template]:
    """Load all packaged templates keyed by name."""
    ref = resources.files(_RESOURCES_PACKAGE) / _TEMPLATES_FILENAME
    with ref.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    templates: dict[str, Template] = {}
    for key, parts in data.items():
        if not isinstance(parts, dict) or not {"before", "after"} <= parts.keys():
            raise ValueError(f"Template '{key}' must define 'before' and 'after'")
        templates[key] = Template(key, str(parts["before"]), str(parts["after"]))
    return templates


def get_template(name: str = DEFAULT_TEMPLATE) -> Template:
    templates = load_templates()
    try:
        return templates[name]
    except KeyError:
        raise KeyError(
            f"Unknown template '{name}' (available: {', '.join(sorted(templates))})"
        ) from None


class Compiler:
    """Write every ordered fragment of a graph to the binary stream ``out``.

    Fragment bytes are copied unchanged; template parts are UTF-8 encoded.
    """

    def __init__(self, template: Template, out: BinaryIO):
        self.template = template
        self.out = out

    def compile(self, graph: DependencyGraph, sources: Mapping[Node, Path]) -> int:
        """Drain ``graph`` and write each fragment; return how many were written.

        Names with no source (only mentioned as a relation target) are
        skipped. A cycle raises :class:`~deporder.errors.DependencyCycleError`
        after the fragments ordered so far have been written.
        """
        written = 0
        for name in ordered_names(graph):
            path = sources.get(name)
            if path is None:
                logger.debug("No source for '%s'; skipping", name)
                continue
            try:
                with open(path, "rb") as fh:
                    content = fh.read()
            except FileNotFoundError:
                logger.debug("Source for '%s' vanished (%s); skipping", name, path)
                continue
            except OSError as exc:
                raise SourceAccessError.wrap(path, exc) from exc
            self.write_fragment(name, path, content)
            written += 1
        return written

    def write_fragment(self, name: Node, path: Path, content: bytes) -> None:
        self.out.write(self.template.render_before(name, path).encode(ENCODING))
        self.out.write(content)
        self.out.write(self.template.render_after(name, path).encode(ENCODING))


__all__ = [
    "DEFAULT_TEMPLATE",
    "TIMED_TEMPLATE",
    "Template",
    "load_templates",
    "get_template",
    "Compiler",
]
