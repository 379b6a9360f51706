"""The mutable per-cell state of a terrain map under generation.

Each cell is either ``Uncollapsed`` (a domain of still-possible categories)
or ``Collapsed`` (exactly one category and its traversal cost). Internally
the domains live in a NumPy boolean matrix, the "wave", with one row per
cell in row-major order (``index = y * size + x``) and one column per
catalog position.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np

from wavemap.environment.catalog import (
    TerrainCategory,
    build_adjacency_matrix,
    validate_catalog,
)
from wavemap.types import CategoryID, CellIndex, PixelPos, TilePos

# Orthogonal neighbor offsets: N, S, W, E
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


@dataclass(frozen=True)
class Uncollapsed:
    """A cell still in superposition."""

    domain: frozenset[CategoryID]

    @property
    def entropy(self) -> int:
        return len(self.domain)


@dataclass(frozen=True)
class Collapsed:
    """A cell resolved to a single category."""

    category: TerrainCategory
    cost: float

    @property
    def category_id(self) -> CategoryID:
        return self.category.id


type Cell = Uncollapsed | Collapsed


class Grid:
    """A size x size terrain grid and its per-cell domains.

    A grid belongs to exactly one solve attempt. On contradiction it is
    discarded and a fresh one is built; domains are never reused.
    """

    def __init__(
        self,
        categories: Sequence[TerrainCategory],
        size: int,
        adjacency: np.ndarray | None = None,
    ) -> None:
        """Create a grid where every cell may still be any category.

        Args:
            categories: The (normalized) terrain catalog.
            size: Side length of the square grid.
            adjacency: Precompiled matrix from ``build_adjacency_matrix``.
                Compiled from ``categories`` when omitted.
        """
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        validate_catalog(categories)

        self.size = size
        self.categories: tuple[TerrainCategory, ...] = tuple(categories)
        self.category_ids: list[CategoryID] = [c.id for c in self.categories]
        self._position_by_id = {cid: i for i, cid in enumerate(self.category_ids)}

        if adjacency is None:
            adjacency = build_adjacency_matrix(self.categories)
        self.adjacency = adjacency

        num_cells = size * size
        self.wave = np.ones((num_cells, len(self.categories)), dtype=bool)
        self.collapsed = np.zeros(num_cells, dtype=bool)
        self._tiles: dict[CellIndex, Collapsed] = {}

        # Number of solve attempts it took to produce this grid.
        self.attempts = 0

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    def index(self, x: int, y: int) -> CellIndex:
        return y * self.size + x

    def coords(self, index: CellIndex) -> TilePos:
        return (index % self.size, index // self.size)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def neighbors(self, x: int, y: int) -> Iterator[TilePos]:
        """Yield the in-bounds orthogonal neighbors of (x, y)."""
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield (nx, ny)

    # -------------------------------------------------------------------------
    # Cell state
    # -------------------------------------------------------------------------

    def cell(self, x: int, y: int) -> Cell:
        index = self.index(x, y)
        tile = self._tiles.get(index)
        if tile is not None:
            return tile
        return Uncollapsed(self.domain(x, y))

    def cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Iterate over every cell in row-major order."""
        for y in range(self.size):
            for x in range(self.size):
                yield x, y, self.cell(x, y)

    def domain(self, x: int, y: int) -> frozenset[CategoryID]:
        row = self.wave[self.index(x, y)]
        return frozenset(self.category_ids[i] for i in np.flatnonzero(row))

    def entropy(self, x: int, y: int) -> int:
        return int(self.wave[self.index(x, y)].sum())

    def entropies(self) -> np.ndarray:
        """Domain size of every cell, indexed by flattened cell index."""
        return self.wave.sum(axis=1)

    def is_collapsed(self, x: int, y: int) -> bool:
        return bool(self.collapsed[self.index(x, y)])

    def uncollapsed_count(self) -> int:
        return int(np.count_nonzero(~self.collapsed))

    def is_fully_collapsed(self) -> bool:
        return bool(self.collapsed.all())

    def collapse(self, x: int, y: int, category_id: CategoryID) -> Collapsed:
        """Resolve (x, y) to ``category_id``.

        Raises:
            ValueError: If the cell is already collapsed or ``category_id``
                is not in its domain.
        """
        index = self.index(x, y)
        if self.collapsed[index]:
            raise ValueError(f"Tile at ({x}, {y}) is already collapsed")

        position = self._position_by_id.get(category_id)
        if position is None or not self.wave[index, position]:
            raise ValueError(
                f"Category {category_id} is not a candidate for tile ({x}, {y})"
            )

        category = self.categories[position]
        self.wave[index] = False
        self.wave[index, position] = True
        self.collapsed[index] = True
        tile = Collapsed(category, category.base_cost)
        self._tiles[index] = tile
        return tile

    def restrict(self, x: int, y: int, allowed: np.ndarray) -> bool:
        """Intersect the domain of (x, y) with ``allowed``.

        Domains only ever shrink. Returns True if the domain changed.
        """
        index = self.index(x, y)
        current = self.wave[index]
        narrowed = current & allowed
        if np.array_equal(narrowed, current):
            return False
        self.wave[index] = narrowed
        return True

    def support(self, x: int, y: int) -> np.ndarray:
        """Categories that may sit next to (x, y) given its current domain.

        For a collapsed cell this is exactly its category's adjacency row.
        """
        row = self.wave[self.index(x, y)]
        return self.adjacency[row].any(axis=0)

    # -------------------------------------------------------------------------
    # Hand-off to the pathfinder and presentation layer
    # -------------------------------------------------------------------------

    def cost_map(self) -> np.ndarray:
        """Traversal cost per tile, indexed as ``cost[x, y]``.

        Uncollapsed tiles have no defined cost and are reported as ``inf``.
        """
        cost = np.full((self.size, self.size), math.inf, dtype=np.float64)
        for index, tile in self._tiles.items():
            x, y = self.coords(index)
            cost[x, y] = tile.cost
        return cost

    def category_map(self) -> np.ndarray:
        """Category id per tile, indexed as ``ids[x, y]``.

        Raises:
            ValueError: If any tile is still uncollapsed.
        """
        if not self.is_fully_collapsed():
            raise ValueError("Category map requires a fully collapsed grid")

        ids = np.empty((self.size, self.size), dtype=np.int64)
        for index, tile in self._tiles.items():
            x, y = self.coords(index)
            ids[x, y] = tile.category_id
        return ids

    def tile_center(self, x: int, y: int, tile_size: float = 1.0) -> PixelPos:
        return ((x + 0.5) * tile_size, (y + 0.5) * tile_size)
