"""Space-utilization metrics for zones in a store and shelves in a zone."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..layout.geometry import RectLike, total_area
from ..layout.overlap import has_overlaps


@dataclass(frozen=True)
class LayoutMetrics:
    """Store-level metrics.

    utilization is the summed zone area as a percent of the store area,
    capped at 100. A region covered by two zones is counted twice.
    """

    utilization: float = 0.0
    overlapping_zones: bool = False
    unused_space: float = 0.0


@dataclass(frozen=True)
class ShelfMetrics:
    """Zone-level metrics for the shelves of one zone."""

    utilization: float = 0.0
    overlapping_shelves: bool = False
    unused_space: float = 0.0
    accessibility: float = 0.0


def utilization_percent(covered: float, container: float) -> float:
    """Percent of container covered, clamped to [0, 100]."""
    if container <= 0:
        return 0.0
    return max(0.0, min(100.0, covered / container * 100))


def accessibility_score(walkway: float, zone_area: float) -> float:
    """Walkway ratio mapped linearly so 50% walkway scores 100.

    ``min(100, walkway / zone_area * 200)``. Goes negative when overlapping
    shelves add up to more than the zone.
    """
    if zone_area <= 0:
        return 0.0
    return min(100.0, walkway / zone_area * 200)


def compute_layout_metrics(
    width: float,
    height: float,
    zones: Sequence[RectLike],
    gap: float = 0.0,
) -> LayoutMetrics:
    store_area = width * height
    zone_area = total_area(zones)
    return LayoutMetrics(
        utilization=utilization_percent(zone_area, store_area),
        overlapping_zones=has_overlaps(zones, gap),
        unused_space=max(0.0, store_area - zone_area),
    )


def compute_shelf_metrics(
    zone_width: float,
    zone_height: float,
    shelves: Sequence[RectLike],
    gap: float = 0.1,
) -> ShelfMetrics:
    zone_area = zone_width * zone_height
    shelf_area = total_area(shelves)
    return ShelfMetrics(
        utilization=utilization_percent(shelf_area, zone_area),
        overlapping_shelves=has_overlaps(shelves, gap),
        unused_space=max(0.0, zone_area - shelf_area),
        accessibility=accessibility_score(zone_area - shelf_area, zone_area),
    )
