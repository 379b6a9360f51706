from __future__ import annotations

from collections.abc import Iterator

import pytest

from wavemap.environment.catalog import (
    TerrainCategory,
    default_catalog,
    normalize_adjacency,
)
from wavemap.environment.generators.wfc_solver import attempt_stats
from wavemap.util import rng


@pytest.fixture(autouse=True)
def seeded_rng_streams() -> Iterator[None]:
    """Reseed the shared RNG streams and clear solve statistics for each test."""
    rng.init(12345)
    attempt_stats.clear()
    yield
    attempt_stats.clear()


@pytest.fixture
def two_biomes() -> list[TerrainCategory]:
    """A and B, each self-adjacent and adjacent to the other, cost 1.0."""
    categories = [
        TerrainCategory(1, "A", 1.0, {1: True, 2: True}),
        TerrainCategory(2, "B", 1.0, {2: True, 1: True}),
    ]
    normalize_adjacency(categories)
    return categories


@pytest.fixture
def gradient_biomes() -> list[TerrainCategory]:
    """Grass <-> Dirt <-> Gravel, where Grass and Gravel may never touch."""
    categories = [
        TerrainCategory(0, "Grass", 1.0, {1: True, 2: False}),
        TerrainCategory(1, "Dirt", 2.0, {2: True}),
        TerrainCategory(2, "Gravel", 3.0),
    ]
    normalize_adjacency(categories)
    return categories


@pytest.fixture
def seeded_biomes() -> list[TerrainCategory]:
    """The built-in six-biome catalog, normalized."""
    categories = default_catalog()
    normalize_adjacency(categories)
    return categories
