"""Input validation with clear error messages for layout edits."""

from __future__ import annotations

import math
from dataclasses import fields
from typing import Any, Mapping

_SPATIAL_FIELDS = ("x", "y", "width", "height")
_DERIVED_FIELDS = frozenset({"is_overlapping"})


def _check_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(
            f"'{name}' must be a number, got {type(value).__name__}."
        )
    if not math.isfinite(value):
        raise ValueError(f"'{name}' must be finite, got {value}.")
    return float(value)


def validate_dimensions(width: Any, height: Any) -> tuple[float, float]:
    """Validate container dimensions. Both must be finite and > 0."""
    width = _check_number("width", width)
    height = _check_number("height", height)
    if width <= 0 or height <= 0:
        raise ValueError(
            f"Dimensions must be positive, got width={width}, height={height}."
        )
    return width, height


def validate_rectangle_fields(data: Mapping[str, Any]) -> None:
    """Validate the spatial fields present in ``data``.

    Positions may be any finite number (containment is not enforced);
    width and height must be positive.
    """
    for name in _SPATIAL_FIELDS:
        if name in data:
            value = _check_number(name, data[name])
            if name in ("width", "height") and value <= 0:
                raise ValueError(f"'{name}' must be positive, got {value}.")


def clean_updates(
    entity_cls: type,
    entity_id: str,
    updates: Mapping[str, Any],
) -> dict[str, Any]:
    """Validate a partial update for an entity dataclass.

    Drops derived fields (they are always recomputed) and rejects unknown
    fields or an attempt to change the id.
    """
    allowed = {f.name for f in fields(entity_cls)}
    unknown = sorted(set(updates) - allowed)
    if unknown:
        raise TypeError(
            f"Unknown {entity_cls.__name__} field(s): {unknown}. "
            f"Allowed: {sorted(allowed - _DERIVED_FIELDS - {'id'})}"
        )
    if "id" in updates and updates["id"] != entity_id:
        raise ValueError(
            f"Cannot change the id of {entity_cls.__name__} '{entity_id}'."
        )
    cleaned = {
        k: v for k, v in updates.items()
        if k not in _DERIVED_FIELDS and k != "id"
    }
    validate_rectangle_fields(cleaned)
    return cleaned


def new_entity_fields(
    entity_cls: type,
    data: Any = None,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Collect and validate the fields for a new entity (id is assigned later).

    ``data`` may be a mapping or an instance of any entity dataclass;
    ``extra`` keyword fields override it. A supplied id is ignored and
    fields the entity does not define are dropped.
    """
    if data is None:
        merged: dict[str, Any] = {}
    elif isinstance(data, Mapping):
        merged = dict(data)
    elif hasattr(data, "__dataclass_fields__"):
        merged = {f.name: getattr(data, f.name) for f in fields(data)}
    else:
        raise TypeError(
            f"Expected a mapping or {entity_cls.__name__}, got {type(data).__name__}."
        )
    if extra:
        merged.update(extra)
    merged.pop("id", None)

    allowed = {f.name for f in fields(entity_cls)} - {"id"}
    merged = {k: v for k, v in merged.items() if k in allowed and k not in _DERIVED_FIELDS}
    missing = [name for name in ("name", *_SPATIAL_FIELDS) if name not in merged]
    if missing:
        raise TypeError(f"{entity_cls.__name__} is missing required field(s): {missing}")
    validate_rectangle_fields(merged)
    return merged
