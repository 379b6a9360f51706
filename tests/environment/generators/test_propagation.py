"""Tests for arc-consistency propagation."""

from __future__ import annotations

import numpy as np
import pytest

from wavemap.environment.catalog import TerrainCategory, normalize_adjacency
from wavemap.environment.generators.errors import WFCContradiction
from wavemap.environment.generators.propagation import propagate
from wavemap.environment.grid import Grid

GRASS, DIRT, GRAVEL = 0, 1, 2


def _mask(*positions: int) -> np.ndarray:
    """Boolean domain mask over the gradient catalog."""
    mask = np.zeros(3, dtype=bool)
    mask[list(positions)] = True
    return mask


class TestPropagate:
    def test_collapse_narrows_neighbors(
        self, gradient_biomes: list[TerrainCategory]
    ) -> None:
        """Neighbors of a Grass tile lose Gravel."""
        grid = Grid(gradient_biomes, 3)
        grid.collapse(1, 1, GRASS)
        changed = propagate(grid, 1, 1)

        for pos in [(1, 0), (1, 2), (0, 1), (2, 1)]:
            assert grid.domain(*pos) == frozenset({GRASS, DIRT})
        assert set(changed) == {(1, 0), (1, 2), (0, 1), (2, 1)}

    def test_unchanged_neighbors_are_not_requeued(
        self, gradient_biomes: list[TerrainCategory]
    ) -> None:
        """Dirt permits everything, so nothing changes."""
        grid = Grid(gradient_biomes, 3)
        grid.collapse(1, 1, DIRT)
        assert propagate(grid, 1, 1) == []
        assert grid.entropies().tolist() == [3, 3, 3, 3, 1, 3, 3, 3, 3]

    def test_chains_transitively(self) -> None:
        """A tile that can only sit next to itself floods the whole grid."""
        categories = [
            TerrainCategory(1, "Island", adjacency={2: False}),
            TerrainCategory(2, "Sea"),
        ]
        normalize_adjacency(categories)
        grid = Grid(categories, 4)
        grid.collapse(0, 0, 1)
        propagate(grid, 0, 0)

        assert grid.is_fully_collapsed()
        assert {cell.category_id for _, _, cell in grid.cells()} == {1}

    def test_singleton_domains_are_collapsed(
        self, gradient_biomes: list[TerrainCategory]
    ) -> None:
        """A neighbor narrowed to one candidate becomes Collapsed."""
        grid = Grid(gradient_biomes, 2)
        grid.restrict(1, 0, _mask(GRASS, GRAVEL))
        grid.collapse(0, 0, GRASS)
        propagate(grid, 0, 0)

        assert grid.is_collapsed(1, 0)
        assert grid.cell(1, 0).category_id == GRASS

    def test_collapsed_neighbors_are_skipped(
        self, gradient_biomes: list[TerrainCategory]
    ) -> None:
        grid = Grid(gradient_biomes, 2)
        grid.collapse(1, 0, DIRT)
        grid.collapse(0, 0, GRASS)
        propagate(grid, 0, 0)
        assert grid.cell(1, 0).category_id == DIRT

    def test_empty_neighbor_raises_contradiction(
        self, gradient_biomes: list[TerrainCategory]
    ) -> None:
        grid = Grid(gradient_biomes, 2)
        grid.restrict(1, 0, _mask(GRAVEL))
        grid.collapse(0, 0, GRASS)

        with pytest.raises(WFCContradiction, match=r"\(1, 0\)"):
            propagate(grid, 0, 0)

    def test_domains_only_shrink(
        self, gradient_biomes: list[TerrainCategory]
    ) -> None:
        grid = Grid(gradient_biomes, 5)
        before = grid.entropies().copy()
        grid.collapse(2, 2, GRAVEL)
        propagate(grid, 2, 2)
        after = grid.entropies()
        assert (after <= before).all()
