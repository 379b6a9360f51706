"""Wave Function Collapse solver for terrain grids.

The solver repeatedly picks the uncollapsed cell with the fewest remaining
candidates (ties broken uniformly at random), collapses it to one of its
candidates (uniformly at random) and propagates the consequences to its
neighbors. When a contradiction is hit the whole grid is thrown away and a
fresh attempt starts from scratch.

Usage:
    from wavemap.environment.catalog import default_catalog, normalize_adjacency
    from wavemap.environment.generators.wfc_solver import solve

    categories = default_catalog()
    normalize_adjacency(categories)
    grid = solve(categories, 25, rng=random.Random(42))

Randomness comes from the "map.wfc" stream unless an explicit ``rng`` is
injected, which makes seeded regeneration reproducible.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

import numpy as np

from wavemap import config
from wavemap.environment.catalog import (
    TerrainCategory,
    build_adjacency_matrix,
    validate_catalog,
)
from wavemap.environment.generators.errors import (
    WFCContradiction,
    WFCConvergenceError,
)
from wavemap.environment.generators.propagation import propagate
from wavemap.environment.grid import Grid
from wavemap.types import TilePos
from wavemap.util import rng as rng_streams
from wavemap.util.metrics import MostRecentNVar
from wavemap.util.rng import RNG

logger = logging.getLogger(__name__)

_wfc_rng = rng_streams.get("map.wfc")

# Attempts needed by each recent successful solve.
attempt_stats = MostRecentNVar(config.SOLVE_STATS_SAMPLE_SIZE)


class WFCSolver:
    """Entropy-driven collapse/propagate loop with restart on contradiction.

    A solver owns at most one in-flight grid at a time. ``step()`` advances
    that grid by one collapse, ``run_attempt()`` drives a fresh grid to
    completion, and ``solve()`` retries attempts until one succeeds.
    """

    def __init__(
        self,
        categories: Sequence[TerrainCategory],
        size: int,
        rng: RNG | None = None,
    ) -> None:
        """Initialize the solver.

        Args:
            categories: Normalized terrain catalog. Not mutated.
            size: Grid side length.
            rng: Random source for tie-breaking and collapse choices.
                Defaults to the "map.wfc" stream.
        """
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        validate_catalog(categories)

        self.categories: tuple[TerrainCategory, ...] = tuple(categories)
        self.size = size
        self.rng: RNG = rng if rng is not None else _wfc_rng
        self.adjacency = build_adjacency_matrix(self.categories)
        self.grid: Grid | None = None

    def reset(self) -> Grid:
        """Discard the current grid and start a fresh attempt.

        Cells that start with a single candidate are collapsed and
        propagated immediately.

        Raises:
            WFCContradiction: If the initial singletons already conflict.
        """
        self.grid = Grid(self.categories, self.size, self.adjacency)
        entropies = self.grid.entropies()
        for index in np.flatnonzero(entropies == 1):
            x, y = self.grid.coords(int(index))
            if self.grid.is_collapsed(x, y):
                continue
            self._collapse(x, y, int(np.flatnonzero(self.grid.wave[index])[0]))
        return self.grid

    def select_cell(self) -> TilePos | None:
        """Find the lowest-entropy uncollapsed cell.

        Only cells with more than one candidate compete. Returns None when
        no such cell is left.

        Raises:
            WFCContradiction: If an uncollapsed cell has no candidates.
        """
        grid = self._require_grid()
        entropies = grid.entropies()
        open_cells = ~grid.collapsed

        empty = np.flatnonzero(open_cells & (entropies == 0))
        if len(empty):
            x, y = grid.coords(int(empty[0]))
            raise WFCContradiction(f"Tile at ({x}, {y}) has no valid possibilities.")

        eligible = open_cells & (entropies > 1)
        if not eligible.any():
            return None

        lowest = entropies[eligible].min()
        tied = np.flatnonzero(eligible & (entropies == lowest))
        return grid.coords(int(self.rng.choice(tied.tolist())))

    def step(self) -> bool:
        """Collapse one cell and propagate.

        Returns:
            False once there is nothing left to collapse, True otherwise.

        Raises:
            WFCContradiction: If the attempt has become unsolvable.
        """
        if self.grid is None:
            self.reset()
        grid = self._require_grid()

        target = self.select_cell()
        if target is None:
            return False

        x, y = target
        candidates = np.flatnonzero(grid.wave[grid.index(x, y)])
        if len(candidates) == 0:
            raise WFCContradiction(f"Tile at ({x}, {y}) has no valid possibilities.")

        self._collapse(x, y, int(self.rng.choice(candidates.tolist())))
        return True

    def run_attempt(self) -> Grid:
        """Run one attempt on a fresh grid until every cell is collapsed.

        Raises:
            WFCContradiction: If the attempt fails.
        """
        self.reset()
        while self.step():
            pass

        grid = self._require_grid()
        leftover = np.flatnonzero(~grid.collapsed)
        if len(leftover):
            x, y = grid.coords(int(leftover[0]))
            raise WFCContradiction(
                f"Tile at ({x}, {y}) is still uncollapsed after WFC completion."
            )
        return grid

    def solve(
        self,
        max_attempts: int | None = config.MAX_SOLVE_ATTEMPTS,
        time_budget: float | None = config.SOLVE_TIME_BUDGET,
    ) -> Grid:
        """Retry attempts until one produces a fully collapsed grid.

        Args:
            max_attempts: Attempt ceiling, or None to retry forever.
            time_budget: Wall-clock ceiling in seconds, or None. At least one
                attempt is always made.

        Raises:
            WFCConvergenceError: If the ceiling is reached without success.
        """
        if max_attempts is not None and max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        started = time.perf_counter()
        attempts = 0
        last_error: WFCContradiction | None = None

        while max_attempts is None or attempts < max_attempts:
            if (
                time_budget is not None
                and attempts > 0
                and time.perf_counter() - started >= time_budget
            ):
                break

            attempts += 1
            try:
                grid = self.run_attempt()
            except WFCContradiction as exc:
                last_error = exc
                logger.debug("Restarting due to error: %s", exc)
                continue

            grid.attempts = attempts
            attempt_stats.record(attempts)
            return grid

        logger.warning(
            "WFC gave up on a %dx%d grid after %d attempt(s)",
            self.size,
            self.size,
            attempts,
        )
        raise WFCConvergenceError(
            attempts, str(last_error) if last_error is not None else None
        ) from last_error

    def _collapse(self, x: int, y: int, position: int) -> None:
        grid = self._require_grid()
        grid.collapse(x, y, grid.category_ids[position])
        propagate(grid, x, y)

    def _require_grid(self) -> Grid:
        if self.grid is None:
            raise RuntimeError("Solver has no grid - call reset() first")
        return self.grid


def solve(
    categories: Sequence[TerrainCategory],
    size: int = config.DEFAULT_MAP_SIZE,
    *,
    rng: RNG | None = None,
    max_attempts: int | None = config.MAX_SOLVE_ATTEMPTS,
    time_budget: float | None = config.SOLVE_TIME_BUDGET,
) -> Grid:
    """Generate a fully collapsed ``size`` x ``size`` terrain grid.

    ``categories`` must already have been passed through
    ``normalize_adjacency``.
    """
    solver = WFCSolver(categories, size, rng)
    return solver.solve(max_attempts=max_attempts, time_budget=time_budget)
