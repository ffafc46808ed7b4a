"""Reactive state containers for the store and shelf layouts."""

from .store_state import StoreState
from .shelf_state import ShelfState
from .session import DesignSession

__all__ = [
    "StoreState",
    "ShelfState",
    "DesignSession",
]
