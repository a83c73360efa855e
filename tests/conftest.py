"""Shared pytest fixtures for deporder tests."""

from pathlib import Path

import pytest

from deporder.graph import DependencyGraph


def write_fragments(root: Path, fragments: dict[str, str]) -> Path:
    """Write ``{relative_name: content}`` under ``root`` and return ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for name, content in fragments.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def fragments_dir(tmp_path):
    """Factory writing fragment files into an isolated directory."""

    def _make(fragments: dict[str, str]) -> Path:
        return write_fragments(tmp_path / "fragments", fragments)

    return _make


@pytest.fixture
def graph():
    return DependencyGraph()
