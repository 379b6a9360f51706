"""
Terrain categories and their adjacency rules.

This module defines:
- `TerrainCategory`: one biome kind (id, name, base traversal cost, adjacency
  permissions). Color, commodities and trading post are carried through for
  the presentation layer but are opaque to generation.
- `normalize_adjacency()`: repairs the permission tables so they are
  reflexive and symmetric. Must run once before solving.
- `build_adjacency_matrix()`: compiles the tables into a boolean NumPy matrix
  indexed by catalog position, which is what the solver and propagator use.
- `default_catalog()`: the six seeded biomes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

import numpy as np

from wavemap.types import CategoryID

logger = logging.getLogger(__name__)


class ConflictPolicy(StrEnum):
    """How to reconcile two categories that declare different values for each other."""

    KEEP = "keep"  # Leave both declarations untouched
    FALSE_WINS = "false_wins"  # Forbidden on either side means forbidden on both
    TRUE_WINS = "true_wins"  # Permitted on either side means permitted on both


@dataclass(frozen=True)
class TradingPost:
    id: int
    name: str
    x: int
    y: int


@dataclass
class TerrainCategory:
    """A single biome kind.

    Attributes:
        id: Stable identifier assigned by the catalog loader.
        name: Display name.
        base_cost: Traversal cost of entering a tile of this category.
            ``math.inf`` makes the category impassable.
        adjacency: Maps other category ids to whether this category may be
            placed orthogonally next to them. Undeclared means forbidden.
        color: Opaque display color (e.g. "#228B22").
        commodities: Opaque commodity names produced by this biome.
        trading_post: Optional opaque trading post record.
    """

    id: CategoryID
    name: str
    base_cost: float = 1.0
    adjacency: dict[CategoryID, bool] = field(default_factory=dict)
    color: str = "#FFFFFF"
    commodities: tuple[str, ...] = ()
    trading_post: TradingPost | None = None

    def __post_init__(self) -> None:
        # Also rejects NaN.
        if not self.base_cost >= 0:
            raise ValueError(
                f"Category {self.name!r} needs a non-negative base cost, "
                f"got {self.base_cost}"
            )

    def permits(self, other_id: CategoryID) -> bool:
        """Return True if this category declares ``other_id`` as a valid neighbor."""
        return self.adjacency.get(other_id, False)


def normalize_adjacency(
    categories: Sequence[TerrainCategory],
    policy: ConflictPolicy | str | None = None,
) -> None:
    """Make every adjacency table reflexive and symmetric, in place.

    1. A category with no entry for itself gets ``True``.
    2. If A declares a value for B and B has no entry for A, B receives A's
       value.
    3. If both declare different values, ``policy`` decides (defaults to
       ``config.ADJACENCY_CONFLICT_POLICY``).

    Running this twice yields the same tables as running it once.
    """
    if policy is None:
        from wavemap import config

        policy = config.ADJACENCY_CONFLICT_POLICY
    policy = ConflictPolicy(policy)

    for category in categories:
        if category.id not in category.adjacency:
            category.adjacency[category.id] = True
            logger.debug("Added self-adjacency rule for biome %r", category.name)

        for neighbor in categories:
            if neighbor.id == category.id or neighbor.id not in category.adjacency:
                continue

            allowed = category.adjacency[neighbor.id]
            if category.id not in neighbor.adjacency:
                neighbor.adjacency[category.id] = allowed
                logger.debug(
                    "Added missing reverse adjacency rule: %r -> %r = %s",
                    neighbor.name,
                    category.name,
                    allowed,
                )
                continue

            if neighbor.adjacency[category.id] == allowed:
                continue

            if policy is ConflictPolicy.KEEP:
                logger.debug(
                    "Conflicting adjacency between %r and %r left as declared",
                    category.name,
                    neighbor.name,
                )
                continue

            resolved = policy is ConflictPolicy.TRUE_WINS
            category.adjacency[neighbor.id] = resolved
            neighbor.adjacency[category.id] = resolved
            logger.debug(
                "Reconciled conflicting adjacency %r <-> %r to %s",
                category.name,
                neighbor.name,
                resolved,
            )


def validate_catalog(categories: Sequence[TerrainCategory]) -> None:
    """Raise ValueError if the catalog cannot be solved over at all."""
    if not categories:
        raise ValueError("Terrain catalog is empty")

    seen: set[CategoryID] = set()
    for category in categories:
        if category.id in seen:
            raise ValueError(f"Duplicate terrain category id {category.id}")
        seen.add(category.id)


def build_adjacency_matrix(categories: Sequence[TerrainCategory]) -> np.ndarray:
    """Compile adjacency tables into an (n, n) boolean matrix.

    ``matrix[a, b]`` is True when the categories at catalog positions ``a``
    and ``b`` may sit next to each other. A pair is placeable only when both
    sides permit it, so the matrix is always symmetric even for catalogs
    normalized with ``ConflictPolicy.KEEP``.
    """
    n = len(categories)
    declared = np.zeros((n, n), dtype=bool)
    for a, category in enumerate(categories):
        for b, other in enumerate(categories):
            declared[a, b] = category.permits(other.id)
    return declared & declared.T


def default_catalog() -> list[TerrainCategory]:
    """Return a fresh, unnormalized copy of the seeded biome catalog.

    Adjacency is declared one-sided (lower id -> higher id) the way the
    seed data stores it; ``normalize_adjacency`` fills in the reverse side.
    """
    forest = TerrainCategory(
        1,
        "Forest",
        1.0,
        {2: True, 3: True, 4: True, 5: False, 6: True},
        color="#228B22",
        commodities=("Wood",),
        trading_post=TradingPost(1, "Forest Trading Post", 0, 0),
    )
    desert = TerrainCategory(
        2,
        "Desert",
        1.5,
        {3: True, 4: False, 5: True, 6: True},
        color="#EDC9AF",
        commodities=("Stone",),
        trading_post=TradingPost(2, "Desert Trading Post", 1, 1),
    )
    mountain = TerrainCategory(
        3,
        "Mountain",
        2.0,
        {4: True, 5: True, 6: True},
        color="#A9A9A9",
        commodities=("Gold",),
        trading_post=TradingPost(3, "Mountain Trading Post", 2, 2),
    )
    swamp = TerrainCategory(
        4,
        "Swamp",
        1.2,
        {5: True, 6: True},
        color="#556B2F",
        commodities=("Herbs",),
        trading_post=TradingPost(4, "Swamp Trading Post", 3, 3),
    )
    tundra = TerrainCategory(
        5,
        "Tundra",
        1.8,
        {6: True},
        color="#ADD8E6",
        commodities=("Ice",),
        trading_post=TradingPost(5, "Tundra Trading Post", 4, 4),
    )
    water = TerrainCategory(
        6,
        "Water",
        1.0,
        color="#1E90FF",
        commodities=("Fish",),
        trading_post=TradingPost(6, "Water Trading Post", 5, 5),
    )
    return [forest, desert, mountain, swamp, tundra, water]
