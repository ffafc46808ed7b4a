"""Serializers: convert layout objects to and from the REST document shape.

The wire format uses the camelCase field names of the store API
(``isOverlapping``, ``zoneId``, ``overlappingZones``, ``unusedSpace``).
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from ..core.entities import LayoutSuggestion, Shelf, Zone
from ..core.ids import new_id
from ..core.metrics import LayoutMetrics, ShelfMetrics
from ..core.validation import validate_dimensions, validate_rectangle_fields
from ..engine import ShelfSnapshot, StoreSnapshot


def zone_to_dict(zone: Zone) -> dict[str, Any]:
    return {
        "id": zone.id,
        "name": zone.name,
        "color": zone.color,
        "x": zone.x,
        "y": zone.y,
        "width": zone.width,
        "height": zone.height,
        "isOverlapping": zone.is_overlapping,
    }


def shelf_to_dict(shelf: Shelf) -> dict[str, Any]:
    return {
        "id": shelf.id,
        "name": shelf.name,
        "category": shelf.category,
        "x": shelf.x,
        "y": shelf.y,
        "width": shelf.width,
        "height": shelf.height,
        "zoneId": shelf.zone_id,
        "isOverlapping": shelf.is_overlapping,
    }


def metrics_to_dict(metrics: LayoutMetrics | ShelfMetrics) -> dict[str, Any]:
    if isinstance(metrics, ShelfMetrics):
        return {
            "utilization": metrics.utilization,
            "overlappingShelves": metrics.overlapping_shelves,
            "unusedSpace": metrics.unused_space,
            "accessibility": metrics.accessibility,
        }
    return {
        "utilization": metrics.utilization,
        "overlappingZones": metrics.overlapping_zones,
        "unusedSpace": metrics.unused_space,
    }


def snapshot_to_dict(snapshot: StoreSnapshot | ShelfSnapshot) -> dict[str, Any]:
    """Output snapshot: rectangles with overlap flags plus a metrics record."""
    if isinstance(snapshot, ShelfSnapshot):
        return {
            "zoneId": snapshot.zone_id,
            "width": snapshot.width,
            "height": snapshot.height,
            "shelves": [shelf_to_dict(s) for s in snapshot.shelves],
            "metrics": metrics_to_dict(snapshot.metrics),
        }
    return {
        "width": snapshot.width,
        "height": snapshot.height,
        "zones": [zone_to_dict(z) for z in snapshot.zones],
        "metrics": metrics_to_dict(snapshot.metrics),
    }


def snapshot_to_json(snapshot: StoreSnapshot | ShelfSnapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot))


def session_to_dict(snapshot: StoreSnapshot, shelves: Iterable[Shelf]) -> dict[str, Any]:
    """Store document with each zone's shelves nested under ``shelves``."""
    doc = snapshot_to_dict(snapshot)
    by_zone: dict[str, list[dict]] = {}
    for s in shelves:
        by_zone.setdefault(s.zone_id, []).append(shelf_to_dict(s))
    for zone_doc in doc["zones"]:
        zone_doc["shelves"] = by_zone.get(zone_doc["id"], [])
    return doc


def _spatial(d: Mapping[str, Any]) -> dict[str, Any]:
    spatial = {k: d[k] for k in ("x", "y", "width", "height") if k in d}
    missing = sorted({"x", "y", "width", "height"} - set(spatial))
    if missing:
        raise ValueError(f"Rectangle '{d.get('name', '?')}' is missing fields: {missing}")
    validate_rectangle_fields(spatial)
    return spatial


def zone_from_dict(d: Mapping[str, Any]) -> Zone:
    """Build a Zone from a wire dict. A missing id gets a fresh one."""
    return Zone(
        id=str(d.get("id") or new_id("zone")),
        name=d.get("name", ""),
        color=d.get("color", Zone.color),
        is_overlapping=bool(d.get("isOverlapping", False)),
        **_spatial(d),
    )


def shelf_from_dict(d: Mapping[str, Any], zone_id: str | None = None) -> Shelf:
    """Build a Shelf from a wire dict; ``zone_id`` overrides ``zoneId``."""
    return Shelf(
        id=str(d.get("id") or new_id("shelf")),
        name=d.get("name", ""),
        category=d.get("category", Shelf.category),
        zone_id=zone_id if zone_id is not None else str(d.get("zoneId", "")),
        is_overlapping=bool(d.get("isOverlapping", False)),
        **_spatial(d),
    )


def store_from_dict(
    doc: Mapping[str, Any],
) -> tuple[float, float, list[Zone], list[Shelf]]:
    """Parse a store document into (width, height, zones, shelves).

    Shelves nested under a zone take that zone's id.
    """
    width, height = validate_dimensions(doc.get("width"), doc.get("height"))
    zones: list[Zone] = []
    shelves: list[Shelf] = []
    for zone_doc in doc.get("zones", []):
        zone = zone_from_dict(zone_doc)
        zones.append(zone)
        for shelf_doc in zone_doc.get("shelves", []):
            shelves.append(shelf_from_dict(shelf_doc, zone_id=zone.id))
    return width, height, zones, shelves


def suggestion_from_dict(d: Mapping[str, Any]) -> LayoutSuggestion:
    return LayoutSuggestion(
        id=str(d.get("id") or new_id("suggestion")),
        name=d.get("name", ""),
        description=d.get("description", ""),
        zones=tuple(zone_from_dict(z) for z in d.get("zones", [])),
        efficiency=float(d.get("efficiency", 0.0)),
    )


# --- DataFrame export ---

def zones_to_frame(zones: Sequence[Zone]) -> pd.DataFrame:
    """One row per zone, indexed by id, with an ``area`` column."""
    df = pd.DataFrame(
        [
            {
                "id": z.id, "name": z.name, "color": z.color,
                "x": z.x, "y": z.y, "width": z.width, "height": z.height,
                "is_overlapping": z.is_overlapping,
            }
            for z in zones
        ],
        columns=["id", "name", "color", "x", "y", "width", "height", "is_overlapping"],
    ).set_index("id")
    df["area"] = (df["width"] * df["height"]).astype(float)
    return df


def shelves_to_frame(shelves: Sequence[Shelf]) -> pd.DataFrame:
    """One row per shelf, indexed by id, with an ``area`` column."""
    df = pd.DataFrame(
        [
            {
                "id": s.id, "name": s.name, "category": s.category,
                "zone_id": s.zone_id,
                "x": s.x, "y": s.y, "width": s.width, "height": s.height,
                "is_overlapping": s.is_overlapping,
            }
            for s in shelves
        ],
        columns=["id", "name", "category", "zone_id", "x", "y",
                 "width", "height", "is_overlapping"],
    ).set_index("id")
    df["area"] = (df["width"] * df["height"]).astype(float)
    return df


def category_area_summary(shelves: Sequence[Shelf]) -> pd.DataFrame:
    """Shelf count, total area and area share (%) per category.

    Categories are ordered by first appearance.
    """
    df = shelves_to_frame(shelves)
    summary = df.groupby("category", sort=False).agg(
        shelves=("area", "size"),
        area=("area", "sum"),
    )
    total = summary["area"].sum()
    summary["share"] = summary["area"] / total * 100 if total > 0 else 0.0
    return summary
