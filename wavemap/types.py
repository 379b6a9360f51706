from __future__ import annotations

# =============================================================================
# SPATIAL TYPES
# =============================================================================

type TileCoord = int  # Always integer tile position
type TilePos = tuple[TileCoord, TileCoord]  # Example: (5, 3) = tile 5,3 on the grid

# Flattened row-major cell index: index = y * size + x
type CellIndex = int

# Pixel coordinates of tile centers handed to the presentation layer
type PixelCoord = int | float
type PixelPos = tuple[PixelCoord, PixelCoord]  # Example: (22.5, 7.5)

# =============================================================================
# CATALOG TYPES
# =============================================================================

# Stable identifier of a terrain category, as assigned by the catalog loader.
type CategoryID = int

# =============================================================================
# RANDOMNESS
# =============================================================================

type RandomSeed = int | str | None
