"""DesignSession: the single active store layout and its shelves."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..engine import ShelfSnapshot, StoreSnapshot
from ..io.serializers import session_to_dict, store_from_dict
from .shelf_state import ShelfState
from .store_state import StoreState

logger = logging.getLogger(__name__)


class DesignSession:
    """Owns one StoreState and one ShelfState.

    Keeps the shelf scope in sync with the store: when the loaded zone is
    resized, the shelf metrics are recomputed for its new size.

    Usage::

        session = DesignSession.with_defaults()
        session.store.add_zone(name="Bakery", x=2, y=12, width=8, height=6)
        session.open_zone("1")
        session.shelves.add_shelf(name="Bread", x=1, y=1, width=3, height=1)
    """

    def __init__(
        self,
        store: StoreState | None = None,
        shelves: ShelfState | None = None,
    ) -> None:
        self.store = store if store is not None else StoreState()
        self.shelves = shelves if shelves is not None else ShelfState()
        self.store.param.watch(self._on_zones_changed, "zones")

    @classmethod
    def with_defaults(cls) -> DesignSession:
        return cls(store=StoreState.with_defaults())

    def _on_zones_changed(self, event) -> None:
        zone_id = self.shelves.zone_id
        if zone_id is None:
            return
        zone = self.store.get_zone(zone_id)
        if zone is None:
            return
        if (zone.width, zone.height) != (self.shelves.zone_width, self.shelves.zone_height):
            self.shelves.set_zone_dimensions(zone.width, zone.height)

    def open_zone(self, zone_id: str) -> ShelfSnapshot:
        """Load a zone's shelves as the working scope."""
        zone = self.store.get_zone(zone_id)
        if zone is None:
            raise KeyError(f"Zone '{zone_id}' not found. Available: "
                           f"{[z.id for z in self.store.zones]}")
        self.store.select_zone(zone_id)
        return self.shelves.load_zone(zone.id, zone.width, zone.height)

    def delete_zone(self, zone_id: str, cascade: bool = False) -> StoreSnapshot:
        """Delete a zone. Its shelves are kept as orphans unless ``cascade``.

        If the zone is the one loaded for shelf editing, the shelf scope is
        unloaded.
        """
        snap = self.store.delete_zone(zone_id)
        if cascade:
            self.shelves.delete_all_shelves_in_zone(zone_id)
        elif self.shelves.shelves_in_zone(zone_id):
            logger.info("Zone %s deleted; its shelves are now orphaned", zone_id)
        if self.shelves.zone_id == zone_id:
            self.shelves.unload_zone()
        return snap

    def orphaned_shelves(self) -> list:
        return self.shelves.orphaned_shelves(z.id for z in self.store.zones)

    def to_dict(self) -> dict[str, Any]:
        """The store document with each zone's shelves nested under it."""
        return session_to_dict(self.store.snapshot(), self.shelves.shelves)

    def load_dict(self, doc: Mapping[str, Any]) -> StoreSnapshot:
        """Replace store and shelves with a store document."""
        width, height, zones, shelves = store_from_dict(doc)
        snap = self.store.load(width, height, zones)
        self.shelves.load(shelves)
        return snap
