"""Row packing: deterministic left-to-right, top-to-bottom auto-arrangement."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Sequence, TypeVar

logger = logging.getLogger(__name__)

MIN_PACKED_WIDTH = 1.0

T = TypeVar("T")


@dataclass(frozen=True)
class PackResult:
    """Output of a packing pass.

    ``items`` keeps the input order. ``scaled_ids`` lists items whose size
    was reduced to fit vertically and ``overflow_ids`` items wider than
    the container, which overflow their row.
    """

    items: tuple
    scaled_ids: tuple[str, ...] = ()
    overflow_ids: tuple[str, ...] = ()

    @property
    def is_lossless(self) -> bool:
        return not self.scaled_ids and not self.overflow_ids


def _place(item: T, x: float, y: float, width: float, height: float) -> T:
    changes = {"x": x, "y": y, "width": width, "height": height}
    if any(f.name == "is_overlapping" for f in fields(item)):
        changes["is_overlapping"] = False
    return replace(item, **changes)


def pack_rows(
    items: Sequence[T],
    width: float,
    height: float,
    spacing: float = 0.0,
    min_width: float = MIN_PACKED_WIDTH,
) -> PackResult:
    """Reposition items in rows inside a ``width`` x ``height`` container.

    Items are placed in input order. An item that would cross the right
    edge starts a new row; an item that would cross the bottom edge is
    scaled down to the remaining height, with its width scaled by the same
    factor and floored at ``min_width``. An item wider than the container
    is not clipped.

    ``spacing`` is the aisle kept before the first item, between items,
    between rows and before the far walls. With ``spacing=0`` items are
    packed edge to edge from the origin.

    Parameters
    ----------
    items : sequence of Rectangle dataclasses
        Anything with ``x``, ``y``, ``width`` and ``height`` fields.
    width, height : float
        Container size.
    """
    current_x = spacing
    current_y = spacing
    row_height = 0.0
    row_started = False
    placed = []
    scaled: list[str] = []
    overflow: list[str] = []

    for item in items:
        w, h = item.width, item.height
        item_id = getattr(item, "id", str(len(placed)))

        if row_started and current_x + w > width - spacing:
            current_x = spacing
            current_y += row_height + spacing
            row_height = 0.0
            row_started = False

        if w > width - 2 * spacing:
            overflow.append(item_id)
            logger.warning(
                "Item %s (width %.2f) is wider than its container (%.2f); "
                "it will overflow its row.", item_id, w, width,
            )

        if current_y + h > height - spacing:
            available = max(0.0, height - spacing - current_y)
            factor = available / h if h > 0 else 1.0
            h = available
            w = max(min_width, w * factor)
            scaled.append(item_id)
            logger.warning(
                "Item %s does not fit vertically at y=%.2f; scaled to %.2f x %.2f.",
                item_id, current_y, w, h,
            )

        placed.append(_place(item, current_x, current_y, w, h))
        current_x += w + spacing
        row_height = max(row_height, h)
        row_started = True

    logger.debug("Packed %d item(s) into %.2f x %.2f", len(placed), width, height)
    return PackResult(
        items=tuple(placed),
        scaled_ids=tuple(scaled),
        overflow_ids=tuple(overflow),
    )
