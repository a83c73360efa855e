"""Source enumeration: map a directory tree onto named fragments."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from .errors import SourceAccessError
from .models import Source

logger = logging.getLogger(__name__)

RESERVED_PREFIX = "."


def iter_sources(root: str | Path) -> Iterator[Source]:
    """Yield one :class:`Source` per file below ``root``, in sorted order.

    The node name is the file's base name. Names starting with
    :data:`RESERVED_PREFIX` are skipped, and a repeated base name keeps the
    first path seen. Walk failures raise :class:`SourceAccessError`.
    """
    root = Path(root).expanduser()
    seen: dict[str, Path] = {}
    errors: list[OSError] = []

    for dirpath, dirnames, filenames in os.walk(root, onerror=errors.append):
        if errors:
            break
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.startswith(RESERVED_PREFIX):
                continue
            path = Path(dirpath) / filename
            if filename in seen:
                logger.warning(
                    "Duplicate source name %r at %s (keeping %s)",
                    filename,
                    path,
                    seen[filename],
                )
                continue
            seen[filename] = path
            yield Source(name=filename, path=path)

    if errors:
        raise SourceAccessError.wrap(errors[0].filename, errors[0])


__all__ = ["RESERVED_PREFIX", "iter_sources"]
