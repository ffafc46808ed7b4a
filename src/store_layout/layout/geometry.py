"""Geometric primitives for axis-aligned store-space rectangles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol


class RectLike(Protocol):
    """Anything with an origin and a size in store-space units (meters)."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Bare bounds of a zone or shelf, without its domain fields.

    ``to_dict`` yields exactly the spatial fields, so a clamped Rect can be
    merged back into an entity with ``replace(entity, **rect.to_dict())``.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return area(self)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


def overlaps(a: RectLike, b: RectLike, gap: float = 0.0) -> bool:
    """Return True unless a and b are separated by at least ``gap`` on x or y.

    Rectangles that only share an edge do not overlap when gap is 0.
    """
    return not (
        a.x + a.width + gap <= b.x
        or b.x + b.width + gap <= a.x
        or a.y + a.height + gap <= b.y
        or b.y + b.height + gap <= a.y
    )


def area(r: RectLike) -> float:
    return r.width * r.height


def total_area(rects) -> float:
    """Sum of individual areas (not union, overlaps are double-counted)."""
    return float(sum(area(r) for r in rects))


def fits_within(r: RectLike, width: float, height: float) -> bool:
    """True if r lies entirely inside the container [0, width] x [0, height]."""
    return (
        r.x >= 0
        and r.y >= 0
        and r.x + r.width <= width
        and r.y + r.height <= height
    )


def clamp_to_container(
    r: RectLike,
    width: float,
    height: float,
    min_size: float = 0.0,
) -> Rect:
    """Clamp r so it lies inside a ``width`` x ``height`` container.

    Size is clamped first to [min_size, container size], then position to
    [0, container - size].
    """
    w = max(min_size, min(r.width, width))
    h = max(min_size, min(r.height, height))
    x = max(0.0, min(r.x, width - w))
    y = max(0.0, min(r.y, height - h))
    return Rect(x, y, w, h)


def centered_origin(r: RectLike, width: float, height: float) -> tuple[float, float]:
    """Origin that centers r in the container, never negative."""
    return max(0.0, (width - r.width) / 2), max(0.0, (height - r.height) / 2)


def snap_to_grid(value: float, grid: float) -> float:
    """Round value to the nearest multiple of grid, halves rounding up."""
    if grid <= 0:
        raise ValueError(f"Grid size must be positive, got {grid}.")
    return math.floor(value / grid + 0.5) * grid
