"""Constraint-propagation terrain generation and cost-aware pathfinding."""

from wavemap.environment.catalog import (
    ConflictPolicy,
    TerrainCategory,
    TradingPost,
    default_catalog,
    normalize_adjacency,
)
from wavemap.environment.generators import (
    WFCContradiction,
    WFCConvergenceError,
    WFCSolver,
    solve,
)
from wavemap.environment.grid import Collapsed, Grid, Uncollapsed
from wavemap.util.pathfinding import (
    InvalidCoordinateError,
    find_path,
    find_tile_path,
)

__all__ = [
    "Collapsed",
    "ConflictPolicy",
    "Grid",
    "InvalidCoordinateError",
    "TerrainCategory",
    "TradingPost",
    "Uncollapsed",
    "WFCContradiction",
    "WFCConvergenceError",
    "WFCSolver",
    "default_catalog",
    "find_path",
    "find_tile_path",
    "normalize_adjacency",
    "solve",
]
