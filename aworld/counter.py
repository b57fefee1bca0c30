"""Process-wide monotonically increasing identifier source."""

from __future__ import annotations

import itertools
import threading

_lock = threading.Lock()
_counter = itertools.count()


def get_count() -> int:
    """Return the next identifier; each call yields a larger value."""
    with _lock:
        return next(_counter)