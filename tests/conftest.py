"""Shared test fixtures for store-layout."""

import pytest

from store_layout.core.entities import Shelf, Zone
from store_layout.state.shelf_state import ShelfState
from store_layout.state.store_state import StoreState


@pytest.fixture
def default_zones():
    """The three non-overlapping zones of a 30x20 store."""
    return [
        Zone(id="1", name="Grocery", color="#10b981", x=2, y=2, width=12, height=8),
        Zone(id="2", name="Electronics", color="#3b82f6", x=16, y=2, width=12, height=8),
        Zone(id="3", name="Cash Counter", color="#f59e0b", x=12, y=12, width=6, height=4),
    ]


@pytest.fixture
def store(default_zones):
    """30x20 store holding the default zones."""
    return StoreState(width=30, height=20, zones=list(default_zones))


@pytest.fixture
def zone_shelves():
    """Two separated shelves in zone 'z1'."""
    return [
        Shelf(id="s1", name="Main Display", category="general",
              x=1, y=1, width=3, height=1, zone_id="z1"),
        Shelf(id="s2", name="Corner Unit", category="specialty",
              x=5, y=2, width=2, height=1.5, zone_id="z1"),
    ]


@pytest.fixture
def shelf_state(zone_shelves):
    """Shelf state with zone 'z1' (10x8) loaded."""
    state = ShelfState(shelves=list(zone_shelves))
    state.load_zone("z1", 10, 8)
    return state
