"""StoreState: reactive zone layout for the single active store."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Mapping, Sequence

import param

from ..core.entities import LayoutSuggestion, Zone
from ..core.ids import new_id
from ..core.metrics import LayoutMetrics, compute_layout_metrics
from ..core.validation import clean_updates, new_entity_fields, validate_dimensions
from ..defaults import (
    DEFAULT_STORE_HEIGHT,
    DEFAULT_STORE_WIDTH,
    DEFAULT_ZONES,
    MIN_ZONE_SIZE,
    ZONE_OVERLAP_GAP,
    ZONE_PACK_SPACING,
)
from ..engine import StoreSnapshot, optimize_store, recompute_store
from ..layout.geometry import clamp_to_container
from ..layout.packing import PackResult

logger = logging.getLogger(__name__)


class StoreState(param.Parameterized):
    """Store floor with its zones, overlap flags and layout metrics.

    Every mutation recomputes overlap flags and metrics for the whole zone
    list and publishes zones, metrics and selection in one batched
    ``param.update``, so watchers registered with
    ``state.param.watch(...)`` never observe stale flags.

    Bounds containment is not enforced: zones may be added or moved outside
    the store. Pass ``clamp=True`` to ``update_zone`` to keep an edit inside.
    """

    width = param.Number(default=DEFAULT_STORE_WIDTH, bounds=(0, None),
                         inclusive_bounds=(False, True))
    height = param.Number(default=DEFAULT_STORE_HEIGHT, bounds=(0, None),
                          inclusive_bounds=(False, True))
    zones = param.List(default=[], item_type=Zone)
    layout_metrics = param.ClassSelector(class_=LayoutMetrics, default=LayoutMetrics())
    selected_zone_id = param.String(default=None, allow_None=True)

    overlap_gap = param.Number(default=ZONE_OVERLAP_GAP, bounds=(0, None))
    pack_spacing = param.Number(default=ZONE_PACK_SPACING, bounds=(0, None))

    def __init__(self, **params):
        super().__init__(**params)
        self._lock = threading.RLock()
        self.last_pack_result: PackResult | None = None
        self._commit(self.zones)

    @classmethod
    def with_defaults(cls, **params) -> StoreState:
        """A 30 x 20 store holding the Grocery / Electronics / Cash Counter zones."""
        params.setdefault("zones", list(DEFAULT_ZONES))
        return cls(**params)

    # --- Reads ---

    @param.depends("width", "height", "zones", "layout_metrics")
    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            width=self.width,
            height=self.height,
            zones=tuple(self.zones),
            metrics=self.layout_metrics,
        )

    def get_zone(self, zone_id: str) -> Zone | None:
        return next((z for z in self.zones if z.id == zone_id), None)

    @property
    def selected_zone(self) -> Zone | None:
        if self.selected_zone_id is None:
            return None
        return self.get_zone(self.selected_zone_id)

    # --- Internal ---

    def _commit(
        self,
        zones: Sequence[Zone],
        width: float | None = None,
        height: float | None = None,
        **extra: Any,
    ) -> StoreSnapshot:
        """Recompute flags and metrics, then publish everything at once."""
        with self._lock:
            width = self.width if width is None else width
            height = self.height if height is None else height
            snap = recompute_store(width, height, zones, self.overlap_gap)
            self.param.update(
                width=snap.width,
                height=snap.height,
                zones=list(snap.zones),
                layout_metrics=snap.metrics,
                **extra,
            )
            return snap

    # --- Mutations ---

    def set_dimensions(self, width: float, height: float) -> StoreSnapshot:
        """Resize the store. Invalid sizes raise before anything changes."""
        width, height = validate_dimensions(width, height)
        logger.info("Store resized to %.2f x %.2f", width, height)
        return self._commit(self.zones, width=width, height=height)

    def add_zone(self, zone: Mapping[str, Any] | Zone | None = None, **fields: Any) -> StoreSnapshot:
        """Append a zone under a fresh id. Containment is not checked."""
        data = new_entity_fields(Zone, zone, fields)
        with self._lock:
            created = Zone(id=new_id("zone"), **data)
            logger.info("Adding zone %s (%s)", created.id, created.name)
            return self._commit([*self.zones, created])

    def update_zone(
        self,
        zone_id: str,
        updates: Mapping[str, Any] | None = None,
        clamp: bool = False,
        **fields: Any,
    ) -> StoreSnapshot:
        """Merge fields into a zone. Unknown ids are a no-op (still recomputes)."""
        changes = clean_updates(Zone, zone_id, {**(updates or {}), **fields})
        with self._lock:
            zones = []
            for z in self.zones:
                if z.id == zone_id:
                    z = replace(z, **changes)
                    if clamp:
                        bounded = clamp_to_container(z, self.width, self.height, MIN_ZONE_SIZE)
                        z = replace(z, **bounded.to_dict())
                zones.append(z)
            return self._commit(zones)

    def move_zone(self, zone_id: str, x: float, y: float, clamp: bool = False) -> StoreSnapshot:
        return self.update_zone(zone_id, x=x, y=y, clamp=clamp)

    def resize_zone(self, zone_id: str, width: float, height: float,
                    clamp: bool = False) -> StoreSnapshot:
        return self.update_zone(zone_id, width=width, height=height, clamp=clamp)

    def delete_zone(self, zone_id: str) -> StoreSnapshot:
        """Remove a zone, clearing the selection if it was selected.

        Shelves of the zone are not touched here; see DesignSession.delete_zone.
        """
        with self._lock:
            remaining = [z for z in self.zones if z.id != zone_id]
            extra = {}
            if self.selected_zone_id == zone_id:
                extra["selected_zone_id"] = None
            if len(remaining) != len(self.zones):
                logger.info("Deleted zone %s", zone_id)
            return self._commit(remaining, **extra)

    def select_zone(self, zone_id: str | None) -> None:
        self.selected_zone_id = zone_id

    def load(self, width: float, height: float, zones: Sequence[Zone]) -> StoreSnapshot:
        """Replace the whole store, e.g. with a document loaded by the host."""
        width, height = validate_dimensions(width, height)
        with self._lock:
            extra = {}
            if self.selected_zone_id not in {z.id for z in zones}:
                extra["selected_zone_id"] = None
            return self._commit(list(zones), width=width, height=height, **extra)

    def apply_suggestion(self, suggestion: LayoutSuggestion) -> StoreSnapshot:
        """Replace the zone list with a suggestion's zones."""
        logger.info("Applying layout suggestion %s (%d zones)",
                    suggestion.id, len(suggestion.zones))
        return self._commit(list(suggestion.zones), selected_zone_id=None)

    def reset(self) -> StoreSnapshot:
        """Restore the default store and clear the selection."""
        logger.info("Resetting store to defaults")
        return self._commit(
            list(DEFAULT_ZONES),
            width=DEFAULT_STORE_WIDTH,
            height=DEFAULT_STORE_HEIGHT,
            selected_zone_id=None,
        )

    # --- Recompute ---

    def detect_overlaps(self) -> StoreSnapshot:
        """Recompute every zone's ``is_overlapping`` flag (and the metrics)."""
        return self._commit(self.zones)

    def calculate_layout_metrics(self) -> LayoutMetrics:
        with self._lock:
            metrics = compute_layout_metrics(
                self.width, self.height, self.zones, self.overlap_gap,
            )
            self.layout_metrics = metrics
            return metrics

    def optimize_layout(self) -> StoreSnapshot:
        """Row-pack all zones in their current order."""
        with self._lock:
            snap, packed = optimize_store(
                self.snapshot(), spacing=self.pack_spacing, gap=self.overlap_gap,
            )
            self.last_pack_result = packed
            logger.info(
                "Optimized %d zone(s); scaled: %s",
                len(snap.zones), list(packed.scaled_ids) or "none",
            )
            return self._commit(snap.zones)
