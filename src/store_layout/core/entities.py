"""Layout entities: zones, shelves, products and layout suggestions.

Zone and Shelf share the Rectangle base so the geometry, overlap and
packing code can treat them uniformly. All entities are immutable;
every edit returns a new instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from ..layout.geometry import Rect


@dataclass(frozen=True)
class Rectangle:
    """A named axis-aligned rectangle in store-space units (meters)."""

    id: str
    name: str
    x: float
    y: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def area(self) -> float:
        return self.width * self.height

    def moved_to(self, x: float, y: float):
        return replace(self, x=x, y=y)

    def resized_to(self, width: float, height: float):
        return replace(self, width=width, height=height)


@dataclass(frozen=True)
class Zone(Rectangle):
    """A named region of the store floor."""

    color: str = "#3b82f6"
    is_overlapping: bool = False


@dataclass(frozen=True)
class Shelf(Rectangle):
    """A shelf unit positioned inside one zone (coordinates are zone-local)."""

    zone_id: str = ""
    category: str = "general"
    is_overlapping: bool = False


@dataclass(frozen=True)
class Product:
    """A product footprint. Not used by the layout engine itself."""

    id: str
    name: str
    category: str
    width: float
    height: float
    depth: float
    color: str
    price: float | None = None


@dataclass(frozen=True)
class LayoutSuggestion:
    """A candidate zone arrangement produced by a suggestion service."""

    id: str
    name: str
    description: str = ""
    zones: tuple[Zone, ...] = field(default_factory=tuple)
    efficiency: float = 0.0
