"""
Configuration constants.

Centralizes the tunable values used by the generator and pathfinder.
Callers override any of these by passing explicit arguments.
"""

from typing import Literal

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = "burrito1"
RANDOM_SEED = None

# =============================================================================
# MAP GENERATION
# =============================================================================

# Side length of the square terrain grid.
DEFAULT_MAP_SIZE = 25

# How conflicting adjacency declarations are reconciled before solving.
ADJACENCY_CONFLICT_POLICY: Literal["keep", "false_wins", "true_wins"] = "false_wins"

# Maximum number of fresh attempts before the solver gives up.
# Set to None for unbounded retries.
MAX_SOLVE_ATTEMPTS: int | None = 1000

# Wall-clock budget (seconds) for a single solve() call. None disables it.
SOLVE_TIME_BUDGET: float | None = None

# Number of recent solves tracked by the attempt statistics.
SOLVE_STATS_SAMPLE_SIZE = 100

# =============================================================================
# PRESENTATION HAND-OFF
# =============================================================================

# Pixel size of one tile; path points are reported as tile centers.
DEFAULT_TILE_SIZE = 15
