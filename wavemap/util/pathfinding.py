"""A* pathfinding over a solved terrain grid.

Movement is 4-connected. Entering a tile costs that tile's base traversal
cost (the cost belongs to the tile being entered, not the edge), and the
heuristic is the Manhattan distance to the goal. Tiles with a non-finite
cost, and tiles that were never collapsed, are impassable.
"""

from __future__ import annotations

import heapq
import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from wavemap.types import PixelPos, TilePos

if TYPE_CHECKING:
    import numpy as np

    from wavemap.environment.grid import Grid


class InvalidCoordinateError(ValueError):
    """Raised when a path endpoint lies outside the grid."""


@dataclass
class PathNode:
    """Search state for one tile during a single A* query."""

    pos: TilePos
    g: float
    h: float
    parent: TilePos | None = None

    @property
    def f(self) -> float:
        return self.g + self.h


def manhattan(a: TilePos, b: TilePos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _check_endpoint(grid: Grid, pos: TilePos, label: str) -> None:
    x, y = pos
    if not all(isinstance(v, numbers.Integral) for v in pos):
        raise InvalidCoordinateError(
            f"{label} {pos} must be integer tile coordinates"
        )
    if not grid.in_bounds(x, y):
        raise InvalidCoordinateError(
            f"{label} {pos} is outside the {grid.size}x{grid.size} grid"
        )


def find_tile_path(grid: Grid, start: TilePos, goal: TilePos) -> list[TilePos]:
    """Calculate the cheapest path from start to goal using A*.

    Args:
        grid: A solved grid. Uncollapsed tiles are treated as impassable.
        start: The (x, y) starting tile.
        goal: The (x, y) target tile.

    Returns:
        The tiles from start to goal, both included. An empty list if the
        goal cannot be reached.

    Raises:
        InvalidCoordinateError: If either endpoint is out of bounds.
    """
    _check_endpoint(grid, start, "Start")
    _check_endpoint(grid, goal, "Goal")

    cost = grid.cost_map()
    origin = PathNode(start, 0.0, manhattan(start, goal))
    nodes: dict[TilePos, PathNode] = {start: origin}
    open_heap: list[tuple[float, int, TilePos]] = [(origin.f, 0, start)]
    closed: set[TilePos] = set()
    counter = 1

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        closed.add(current)

        if current == goal:
            return _reconstruct(nodes, goal)

        current_node = nodes[current]
        for neighbor in grid.neighbors(*current):
            if neighbor in closed:
                continue

            step_cost = cost[neighbor]
            if not math.isfinite(step_cost):
                continue

            tentative = current_node.g + float(step_cost)
            node = nodes.get(neighbor)
            if node is None:
                node = PathNode(neighbor, tentative, manhattan(neighbor, goal), current)
                nodes[neighbor] = node
            elif tentative >= node.g:
                continue
            else:
                node.g = tentative
                node.parent = current

            heapq.heappush(open_heap, (node.f, counter, neighbor))
            counter += 1

    return []


def _reconstruct(nodes: dict[TilePos, PathNode], goal: TilePos) -> list[TilePos]:
    path: list[TilePos] = []
    pos: TilePos | None = goal
    while pos is not None:
        path.append(pos)
        pos = nodes[pos].parent
    path.reverse()
    return path


def find_path(
    grid: Grid,
    start: TilePos,
    goal: TilePos,
    tile_size: float = 1.0,
) -> list[PixelPos]:
    """Find the cheapest path and report it as tile-center coordinates.

    Returns:
        Centers of every tile on the path, start and goal included, or an
        empty list if the goal is unreachable.

    Raises:
        InvalidCoordinateError: If either endpoint is out of bounds.
    """
    return [
        grid.tile_center(x, y, tile_size) for x, y in find_tile_path(grid, start, goal)
    ]


def path_cost(
    grid: Grid, path: Sequence[TilePos], cost: np.ndarray | None = None
) -> float:
    """Total traversal cost of a tile path; the start tile is free."""
    if cost is None:
        cost = grid.cost_map()
    return float(sum(cost[pos] for pos in path[1:]))
