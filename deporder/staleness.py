"""Skip-if-up-to-date check for compiled output."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import OutputError


def is_up_to_date(out_path: str | Path, mtime: float) -> bool:
    """True if ``out_path`` exists and is strictly newer than ``mtime``.

    Stat failures other than a missing file raise :class:`OutputError`.
    """
    try:
        st = os.stat(out_path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise OutputError.wrap(out_path, exc) from exc
    return st.st_mtime > mtime


__all__ = ["is_up_to_date"]
