"""
Wall-clock helpers.

Generated names and ids embed a millisecond timestamp. The default clock never
returns the same value twice within a process so that two fallback files
created in the same millisecond still get distinct names.
"""

import threading
import time
from typing import Callable

Clock = Callable[[], int]


class MillisClock:
    """Strictly increasing millisecond clock."""

    def __init__(self, source: Callable[[], float] = time.time):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = int(self._source() * 1000)
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now


now_millis = MillisClock()
