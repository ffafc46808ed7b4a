"""Fresh identifiers for newly created zones and shelves."""

from __future__ import annotations

import itertools
import time

_counter = itertools.count()


def new_id(prefix: str = "") -> str:
    """Return a process-unique opaque id, e.g. ``shelf-1718000000000-3``.

    Millisecond timestamp plus a monotonic counter, so ids created within
    the same millisecond still differ.
    """
    stamp = f"{int(time.time() * 1000)}-{next(_counter)}"
    return f"{prefix}-{stamp}" if prefix else stamp
