"""store-layout: 2D zone and shelf layout engine for retail store floors."""

from ._version import __version__
from .core.entities import Rectangle, Zone, Shelf, Product, LayoutSuggestion
from .core.metrics import LayoutMetrics, ShelfMetrics
from .layout.geometry import Rect, overlaps, area, clamp_to_container
from .layout.packing import PackResult, pack_rows
from .engine import (
    StoreSnapshot,
    ShelfSnapshot,
    recompute_store,
    recompute_shelves,
    optimize_store,
    optimize_shelves,
)
from .state import StoreState, ShelfState, DesignSession

__all__ = [
    "__version__",
    "Rectangle",
    "Zone",
    "Shelf",
    "Product",
    "LayoutSuggestion",
    "LayoutMetrics",
    "ShelfMetrics",
    "Rect",
    "overlaps",
    "area",
    "clamp_to_container",
    "PackResult",
    "pack_rows",
    "StoreSnapshot",
    "ShelfSnapshot",
    "recompute_store",
    "recompute_shelves",
    "optimize_store",
    "optimize_shelves",
    "StoreState",
    "ShelfState",
    "DesignSession",
]
