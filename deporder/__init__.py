"""Order shell fragments by their ``# before:`` / ``# after:`` declarations."""

import importlib.metadata

# In-tree execution (tests without an install) has no distribution metadata.
try:  # pragma: no cover - trivial guard
    __version__ = importlib.metadata.version("deporder")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

from .errors import (  # noqa: E402
    DependencyCycleError,
    DeporderError,
    OrderingError,
    OutputError,
    SourceAccessError,
)
from .gather import gather_into, gather_sources  # noqa: E402
from .graph import DependencyGraph  # noqa: E402
from .models import Direction, GatherResult, Relation, Source  # noqa: E402
from .ordering import order, ordered_names  # noqa: E402

__all__ = [
    "__version__",
    "DependencyCycleError",
    "DependencyGraph",
    "DeporderError",
    "Direction",
    "GatherResult",
    "OrderingError",
    "OutputError",
    "Relation",
    "Source",
    "SourceAccessError",
    "gather_into",
    "gather_sources",
    "order",
    "ordered_names",
]
