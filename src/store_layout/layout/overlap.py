"""Pairwise overlap detection over a list of rectangles."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .geometry import RectLike


def _bounds(rects: Sequence[RectLike]) -> tuple[np.ndarray, ...]:
    x = np.array([r.x for r in rects], dtype=np.float64)
    y = np.array([r.y for r in rects], dtype=np.float64)
    w = np.array([r.width for r in rects], dtype=np.float64)
    h = np.array([r.height for r in rects], dtype=np.float64)
    return x, y, w, h


def overlap_matrix(rects: Sequence[RectLike], gap: float = 0.0) -> np.ndarray:
    """Symmetric (n, n) boolean matrix, True where rectangles i and j overlap.

    Uses the same separation rule as ``geometry.overlaps``; the diagonal
    is always False.
    """
    n = len(rects)
    if n == 0:
        return np.zeros((0, 0), dtype=bool)
    x, y, w, h = _bounds(rects)
    right = x + w + gap
    bottom = y + h + gap
    separated = (
        (right[:, None] <= x[None, :])
        | (right[None, :] <= x[:, None])
        | (bottom[:, None] <= y[None, :])
        | (bottom[None, :] <= y[:, None])
    )
    result = ~separated
    np.fill_diagonal(result, False)
    return result


def overlap_flags(rects: Sequence[RectLike], gap: float = 0.0) -> list[bool]:
    """Per-rectangle flag: True if it overlaps at least one other rectangle."""
    if len(rects) < 2:
        return [False] * len(rects)
    return overlap_matrix(rects, gap).any(axis=1).tolist()


def has_overlaps(rects: Sequence[RectLike], gap: float = 0.0) -> bool:
    """Quick check: are there any overlapping pairs?"""
    if len(rects) < 2:
        return False
    return bool(overlap_matrix(rects, gap).any())


def overlapping_pairs(rects: Sequence[RectLike], gap: float = 0.0) -> list[tuple[int, int]]:
    """Return (i, j) index pairs with i < j for every overlapping pair."""
    if len(rects) < 2:
        return []
    upper = np.triu(overlap_matrix(rects, gap), k=1)
    return [(int(i), int(j)) for i, j in zip(*np.nonzero(upper))]
