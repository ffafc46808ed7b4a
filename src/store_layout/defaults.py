"""Default store layout and tunable layout constants."""

from __future__ import annotations

from .core.entities import Zone

ZONE_OVERLAP_GAP = 0.0
SHELF_OVERLAP_GAP = 0.1

# Aisle left around packed shelves; zones pack edge to edge.
ZONE_PACK_SPACING = 0.0
SHELF_PACK_SPACING = 0.5

GRID_SIZE = 0.5
DUPLICATE_OFFSET = 0.5
MIN_SHELF_SIZE = 0.5
MIN_ZONE_SIZE = 1.0

DEFAULT_STORE_WIDTH = 30.0
DEFAULT_STORE_HEIGHT = 20.0

DEFAULT_ZONES: tuple[Zone, ...] = (
    Zone(id="1", name="Grocery", color="#10b981", x=2, y=2, width=12, height=8),
    Zone(id="2", name="Electronics", color="#3b82f6", x=16, y=2, width=12, height=8),
    Zone(id="3", name="Cash Counter", color="#f59e0b", x=12, y=12, width=6, height=4),
)
