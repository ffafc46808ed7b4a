"""Stateless layout engine: snapshot in, snapshot out.

Every function here is pure. Overlap flags and metrics are always
recomputed from scratch over the whole rectangle list, never patched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Sequence, TypeVar

from .core.entities import LayoutSuggestion, Shelf, Zone
from .core.metrics import (
    LayoutMetrics,
    ShelfMetrics,
    compute_layout_metrics,
    compute_shelf_metrics,
)
from .defaults import (
    SHELF_OVERLAP_GAP,
    SHELF_PACK_SPACING,
    ZONE_OVERLAP_GAP,
    ZONE_PACK_SPACING,
)
from .layout.overlap import overlap_flags
from .layout.packing import MIN_PACKED_WIDTH, PackResult, pack_rows

logger = logging.getLogger(__name__)

T = TypeVar("T", Zone, Shelf)


@dataclass(frozen=True)
class StoreSnapshot:
    """Store bounds, its zones with overlap flags, and store-level metrics."""

    width: float
    height: float
    zones: tuple[Zone, ...] = ()
    metrics: LayoutMetrics = field(default_factory=LayoutMetrics)

    def zone(self, zone_id: str) -> Zone | None:
        return next((z for z in self.zones if z.id == zone_id), None)


@dataclass(frozen=True)
class ShelfSnapshot:
    """One zone's bounds, its shelves with overlap flags, and shelf metrics."""

    zone_id: str
    width: float
    height: float
    shelves: tuple[Shelf, ...] = ()
    metrics: ShelfMetrics = field(default_factory=ShelfMetrics)

    def shelf(self, shelf_id: str) -> Shelf | None:
        return next((s for s in self.shelves if s.id == shelf_id), None)


def detect_overlaps(items: Sequence[T], gap: float = 0.0) -> tuple[T, ...]:
    """Return items with ``is_overlapping`` reset then set for every overlapping pair."""
    flags = overlap_flags(items, gap)
    return tuple(
        item if item.is_overlapping == flag else replace(item, is_overlapping=flag)
        for item, flag in zip(items, flags)
    )


def recompute_store(
    width: float,
    height: float,
    zones: Sequence[Zone],
    gap: float = ZONE_OVERLAP_GAP,
) -> StoreSnapshot:
    flagged = detect_overlaps(zones, gap)
    metrics = compute_layout_metrics(width, height, flagged, gap)
    logger.debug(
        "Store recompute: %d zone(s), utilization %.1f%%, overlaps=%s",
        len(flagged), metrics.utilization, metrics.overlapping_zones,
    )
    return StoreSnapshot(width=width, height=height, zones=flagged, metrics=metrics)


def recompute_shelves(
    zone_id: str,
    width: float,
    height: float,
    shelves: Sequence[Shelf],
    gap: float = SHELF_OVERLAP_GAP,
) -> ShelfSnapshot:
    flagged = detect_overlaps(shelves, gap)
    metrics = compute_shelf_metrics(width, height, flagged, gap)
    logger.debug(
        "Shelf recompute for zone %s: %d shelf(s), utilization %.1f%%, "
        "accessibility %.1f",
        zone_id, len(flagged), metrics.utilization, metrics.accessibility,
    )
    return ShelfSnapshot(
        zone_id=zone_id, width=width, height=height,
        shelves=flagged, metrics=metrics,
    )


def optimize_store(
    snapshot: StoreSnapshot,
    spacing: float = ZONE_PACK_SPACING,
    gap: float = ZONE_OVERLAP_GAP,
    min_width: float = MIN_PACKED_WIDTH,
) -> tuple[StoreSnapshot, PackResult]:
    """Row-pack the zones of a snapshot, then recompute flags and metrics."""
    packed = pack_rows(
        snapshot.zones, snapshot.width, snapshot.height,
        spacing=spacing, min_width=min_width,
    )
    result = recompute_store(snapshot.width, snapshot.height, packed.items, gap)
    return result, packed


def optimize_shelves(
    snapshot: ShelfSnapshot,
    spacing: float = SHELF_PACK_SPACING,
    gap: float = SHELF_OVERLAP_GAP,
    min_width: float = MIN_PACKED_WIDTH,
) -> tuple[ShelfSnapshot, PackResult]:
    """Row-pack the shelves of a zone snapshot, then recompute flags and metrics."""
    packed = pack_rows(
        snapshot.shelves, snapshot.width, snapshot.height,
        spacing=spacing, min_width=min_width,
    )
    result = recompute_shelves(
        snapshot.zone_id, snapshot.width, snapshot.height, packed.items, gap,
    )
    return result, packed


def apply_suggestion(
    snapshot: StoreSnapshot,
    suggestion: LayoutSuggestion,
    gap: float = ZONE_OVERLAP_GAP,
) -> StoreSnapshot:
    """Replace the zone list with a suggestion's zones and recompute."""
    return recompute_store(snapshot.width, snapshot.height, suggestion.zones, gap)
