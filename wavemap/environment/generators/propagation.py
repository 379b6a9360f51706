"""Arc-consistency propagation over the 4-neighborhood of a grid.

After a cell is collapsed (or its domain shrinks), each uncollapsed neighbor
keeps only the categories that can sit next to something still possible at
the source cell. Every neighbor whose domain shrank is queued and becomes a
source in turn, until nothing changes.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

import numpy as np

from wavemap.environment.generators.errors import WFCContradiction

if TYPE_CHECKING:
    from wavemap.environment.grid import Grid
    from wavemap.types import TilePos


def propagate(grid: Grid, from_x: int, from_y: int) -> list[TilePos]:
    """Propagate constraints outward from (from_x, from_y) to a fixed point.

    Neighbors left with a single candidate are collapsed on the spot.

    Returns:
        The cells whose domain changed, in the order they were narrowed.

    Raises:
        WFCContradiction: If a neighbor would be left with no candidates.
    """
    queue: deque[TilePos] = deque([(from_x, from_y)])
    queued = {(from_x, from_y)}
    changed: list[TilePos] = []

    while queue:
        x, y = queue.popleft()
        queued.discard((x, y))
        allowed = grid.support(x, y)

        for nx, ny in grid.neighbors(x, y):
            if grid.is_collapsed(nx, ny):
                continue

            current = grid.wave[grid.index(nx, ny)]
            narrowed = current & allowed
            if not narrowed.any():
                raise WFCContradiction(
                    f"Tile at ({nx}, {ny}) has no valid possibilities "
                    "after propagation. Check adjacency rules."
                )

            if not grid.restrict(nx, ny, allowed):
                continue

            changed.append((nx, ny))
            remaining = np.flatnonzero(narrowed)
            if len(remaining) == 1:
                grid.collapse(nx, ny, grid.category_ids[remaining[0]])

            if (nx, ny) not in queued:
                queue.append((nx, ny))
                queued.add((nx, ny))

    return changed
