"""ShelfState: reactive shelf layout, scoped to one zone at a time."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import replace
from typing import Any, Iterable, Mapping, Sequence

import param

from ..core.entities import Shelf
from ..core.ids import new_id
from ..core.metrics import ShelfMetrics
from ..core.validation import clean_updates, new_entity_fields, validate_dimensions
from ..defaults import (
    DUPLICATE_OFFSET,
    GRID_SIZE,
    MIN_SHELF_SIZE,
    SHELF_OVERLAP_GAP,
    SHELF_PACK_SPACING,
)
from ..engine import ShelfSnapshot, detect_overlaps, optimize_shelves, recompute_shelves
from ..layout.geometry import centered_origin, clamp_to_container, fits_within, snap_to_grid
from ..layout.packing import PackResult

logger = logging.getLogger(__name__)


class ShelfState(param.Parameterized):
    """All shelves of the store, with one zone loaded as the working scope.

    Shelf coordinates are local to their zone. Overlap flags are recomputed
    per zone for every zone after each mutation; metrics describe the loaded
    zone only. As with StoreState, shelves, metrics and selection are
    published together in one batched update.
    """

    zone_id = param.String(default=None, allow_None=True)
    zone_width = param.Number(default=0.0, bounds=(0, None))
    zone_height = param.Number(default=0.0, bounds=(0, None))
    shelves = param.List(default=[], item_type=Shelf)
    shelf_metrics = param.ClassSelector(class_=ShelfMetrics, default=ShelfMetrics())
    selected_shelf_id = param.String(default=None, allow_None=True)

    overlap_gap = param.Number(default=SHELF_OVERLAP_GAP, bounds=(0, None))
    pack_spacing = param.Number(default=SHELF_PACK_SPACING, bounds=(0, None))

    def __init__(self, **params):
        super().__init__(**params)
        self._lock = threading.RLock()
        self.last_pack_result: PackResult | None = None
        self._commit(self.shelves)

    # --- Reads ---

    @param.depends("zone_id", "zone_width", "zone_height", "shelves", "shelf_metrics")
    def snapshot(self) -> ShelfSnapshot:
        """The loaded zone's shelves and metrics."""
        return ShelfSnapshot(
            zone_id=self.zone_id or "",
            width=self.zone_width,
            height=self.zone_height,
            shelves=tuple(self.shelves_in_zone()),
            metrics=self.shelf_metrics,
        )

    def get_shelf(self, shelf_id: str) -> Shelf | None:
        return next((s for s in self.shelves if s.id == shelf_id), None)

    def shelves_in_zone(self, zone_id: str | None = None) -> list[Shelf]:
        zone_id = self.zone_id if zone_id is None else zone_id
        return [s for s in self.shelves if s.zone_id == zone_id]

    def shelves_by_category(self, category: str, zone_id: str | None = None) -> list[Shelf]:
        return [s for s in self.shelves_in_zone(zone_id) if s.category == category]

    def orphaned_shelves(self, zone_ids: Iterable[str]) -> list[Shelf]:
        """Shelves whose zone_id is not among ``zone_ids``."""
        known = set(zone_ids)
        return [s for s in self.shelves if s.zone_id not in known]

    @property
    def selected_shelf(self) -> Shelf | None:
        if self.selected_shelf_id is None:
            return None
        return self.get_shelf(self.selected_shelf_id)

    # --- Internal ---

    def _require_zone(self, zone_id: str | None) -> str:
        zone_id = self.zone_id if zone_id is None else zone_id
        if not zone_id:
            raise ValueError("No zone loaded. Call load_zone() or pass zone_id.")
        return zone_id

    def _commit(self, shelves: Sequence[Shelf], **extra: Any) -> ShelfSnapshot:
        """Recompute flags per zone and metrics for the loaded zone, then publish."""
        with self._lock:
            zone_id = extra.get("zone_id", self.zone_id)
            width = extra.get("zone_width", self.zone_width)
            height = extra.get("zone_height", self.zone_height)

            # Positions in ``shelves`` grouped by zone, in first-seen order.
            by_zone: OrderedDict[str, list[int]] = OrderedDict()
            for i, s in enumerate(shelves):
                by_zone.setdefault(s.zone_id, []).append(i)
            result = list(shelves)
            for indices in by_zone.values():
                group = detect_overlaps([shelves[i] for i in indices], self.overlap_gap)
                for i, s in zip(indices, group):
                    result[i] = s

            snap = recompute_shelves(
                zone_id or "", width, height,
                [s for s in result if s.zone_id == zone_id], self.overlap_gap,
            )
            selected = extra.get("selected_shelf_id", self.selected_shelf_id)
            if selected is not None and selected not in {s.id for s in result}:
                extra["selected_shelf_id"] = None
            self.param.update(shelves=result, shelf_metrics=snap.metrics, **extra)
            return snap

    def _edit(self, shelf_id: str, fn) -> ShelfSnapshot:
        with self._lock:
            return self._commit([fn(s) if s.id == shelf_id else s for s in self.shelves])

    # --- Scope ---

    def load_zone(self, zone_id: str, width: float, height: float) -> ShelfSnapshot:
        """Make ``zone_id`` (of the given size) the working scope."""
        width, height = validate_dimensions(width, height)
        extra: dict[str, Any] = {"zone_id": zone_id, "zone_width": width, "zone_height": height}
        selected = self.selected_shelf
        if selected is not None and selected.zone_id != zone_id:
            extra["selected_shelf_id"] = None
        return self._commit(self.shelves, **extra)

    def unload_zone(self) -> ShelfSnapshot:
        """Drop the working scope. Shelves are kept; metrics reset to empty."""
        extra: dict[str, Any] = {"zone_id": None, "zone_width": 0.0, "zone_height": 0.0}
        if self.selected_shelf_id is not None:
            extra["selected_shelf_id"] = None
        return self._commit(self.shelves, **extra)

    def load(self, shelves: Sequence[Shelf]) -> ShelfSnapshot:
        """Replace every shelf and unload the current zone."""
        return self._commit(
            list(shelves),
            zone_id=None, zone_width=0.0, zone_height=0.0, selected_shelf_id=None,
        )

    def set_zone_dimensions(self, width: float, height: float) -> ShelfSnapshot:
        """Update the loaded zone's size (after the zone itself was resized)."""
        width, height = validate_dimensions(width, height)
        return self._commit(self.shelves, zone_width=width, zone_height=height)

    # --- Mutations ---

    def add_shelf(self, shelf: Mapping[str, Any] | Shelf | None = None, **fields: Any) -> ShelfSnapshot:
        """Add a shelf under a fresh id. ``zone_id`` defaults to the loaded zone."""
        data = new_entity_fields(Shelf, shelf, fields)
        data["zone_id"] = self._require_zone(data.get("zone_id") or None)
        with self._lock:
            created = Shelf(id=new_id("shelf"), **data)
            logger.info("Adding shelf %s (%s) to zone %s",
                        created.id, created.name, created.zone_id)
            return self._commit([*self.shelves, created])

    def update_shelf(
        self,
        shelf_id: str,
        updates: Mapping[str, Any] | None = None,
        clamp: bool = False,
        **fields: Any,
    ) -> ShelfSnapshot:
        """Merge fields into a shelf. Unknown ids are a no-op (still recomputes).

        With ``clamp=True`` a shelf of the loaded zone is kept inside it;
        shelves of other zones are never clamped.
        """
        changes = clean_updates(Shelf, shelf_id, {**(updates or {}), **fields})

        def apply(s: Shelf) -> Shelf:
            s = replace(s, **changes)
            if (clamp and s.zone_id == self.zone_id
                    and self.zone_width > 0 and self.zone_height > 0):
                bounded = clamp_to_container(s, self.zone_width, self.zone_height, MIN_SHELF_SIZE)
                s = replace(s, **bounded.to_dict())
            return s

        return self._edit(shelf_id, apply)

    def delete_shelf(self, shelf_id: str) -> ShelfSnapshot:
        with self._lock:
            logger.info("Deleting shelf %s", shelf_id)
            return self._commit([s for s in self.shelves if s.id != shelf_id])

    def delete_all_shelves_in_zone(self, zone_id: str | None = None) -> ShelfSnapshot:
        """Remove every shelf of a zone (the loaded zone by default)."""
        zone_id = self._require_zone(zone_id)
        with self._lock:
            remaining = [s for s in self.shelves if s.zone_id != zone_id]
            logger.info("Deleted %d shelf(s) from zone %s",
                        len(self.shelves) - len(remaining), zone_id)
            return self._commit(remaining)

    def apply_shelf_suggestion(
        self,
        shelves: Sequence[Mapping[str, Any] | Shelf],
        zone_id: str | None = None,
    ) -> ShelfSnapshot:
        """Replace a zone's shelves wholesale with suggested ones (fresh ids)."""
        zone_id = self._require_zone(zone_id)
        created = [
            Shelf(id=new_id("shelf"), **{**new_entity_fields(Shelf, s), "zone_id": zone_id})
            for s in shelves
        ]
        with self._lock:
            kept = [s for s in self.shelves if s.zone_id != zone_id]
            logger.info("Applying %d suggested shelf(s) to zone %s", len(created), zone_id)
            return self._commit([*kept, *created])

    def select_shelf(self, shelf_id: str | None) -> None:
        self.selected_shelf_id = shelf_id

    # --- Quick actions ---

    def duplicate_shelf(self, shelf_id: str) -> ShelfSnapshot:
        """Copy a shelf next to the original, kept inside the loaded zone."""
        source = self.get_shelf(shelf_id)
        if source is None:
            return self.detect_overlaps()
        x = source.x + DUPLICATE_OFFSET
        y = source.y + DUPLICATE_OFFSET
        if self.zone_width > 0 and self.zone_height > 0:
            x = min(x, self.zone_width - source.width)
            y = min(y, self.zone_height - source.height)
        return self.add_shelf(source, name=f"{source.name} (Copy)", x=x, y=y)

    def rotate_shelf(self, shelf_id: str) -> ShelfSnapshot:
        """Swap width and height, only if the rotated shelf still fits the zone."""
        shelf = self.get_shelf(shelf_id)
        if shelf is None:
            return self.detect_overlaps()
        rotated = shelf.resized_to(shelf.height, shelf.width)
        if not (rotated.x + rotated.width <= self.zone_width
                and rotated.y + rotated.height <= self.zone_height):
            logger.info("Shelf %s does not fit rotated; left unchanged", shelf_id)
            return self.detect_overlaps()
        return self.update_shelf(shelf_id, width=rotated.width, height=rotated.height)

    def snap_shelf_to_grid(self, shelf_id: str, grid: float = GRID_SIZE) -> ShelfSnapshot:
        """Round the shelf's position to the grid, then clamp it into the zone."""
        shelf = self.get_shelf(shelf_id)
        if shelf is None:
            return self.detect_overlaps()
        x = snap_to_grid(shelf.x, grid)
        y = snap_to_grid(shelf.y, grid)
        if self.zone_width > 0 and self.zone_height > 0:
            x = max(0.0, min(x, self.zone_width - shelf.width))
            y = max(0.0, min(y, self.zone_height - shelf.height))
        return self.update_shelf(shelf_id, x=x, y=y)

    def center_shelf(self, shelf_id: str) -> ShelfSnapshot:
        shelf = self.get_shelf(shelf_id)
        if shelf is None:
            return self.detect_overlaps()
        x, y = centered_origin(shelf, self.zone_width, self.zone_height)
        return self.update_shelf(shelf_id, x=x, y=y)

    def out_of_bounds_shelves(self) -> list[Shelf]:
        """Shelves of the loaded zone that extend past the zone's bounds."""
        return [
            s for s in self.shelves_in_zone()
            if not fits_within(s, self.zone_width, self.zone_height)
        ]

    # --- Recompute ---

    def detect_overlaps(self) -> ShelfSnapshot:
        return self._commit(self.shelves)

    def calculate_shelf_metrics(self) -> ShelfMetrics:
        return self._commit(self.shelves).metrics

    def optimize_shelves(self) -> ShelfSnapshot:
        """Row-pack the loaded zone's shelves, leaving ``pack_spacing`` aisles."""
        zone_id = self._require_zone(None)
        with self._lock:
            snap, packed = optimize_shelves(
                self.snapshot(), spacing=self.pack_spacing, gap=self.overlap_gap,
            )
            self.last_pack_result = packed
            by_id = {s.id: s for s in snap.shelves}
            logger.info(
                "Optimized %d shelf(s) in zone %s; scaled: %s",
                len(by_id), zone_id, list(packed.scaled_ids) or "none",
            )
            return self._commit([by_id.get(s.id, s) for s in self.shelves])
