"""
Bounded, insertion-ordered memory of themes accepted during one generation session.
"""

import threading
from collections import OrderedDict
from typing import Iterator, List, Optional, Tuple

from focustheme.domain.models import ThemeColorSummary
from focustheme.logging_config import get_logger

logger = get_logger(__name__)


class SessionHistory:
    """Ordered mapping of theme id -> ThemeColorSummary with FIFO eviction.

    Insertion order is acceptance order. When an insert pushes the size past
    capacity, the single oldest entry is evicted. Every read and write holds
    the same lock so concurrent inserts cannot overshoot the bound.

    Lifetime is one session: construct a fresh instance (or call clear()) to
    start over.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: "OrderedDict[str, ThemeColorSummary]" = OrderedDict()
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, theme_id: str, summary: ThemeColorSummary) -> Optional[str]:
        """Insert a summary; return the evicted id, if any.

        Re-adding a known id replaces its summary in place.
        """
        with self._lock:
            self._entries[theme_id] = summary
            if len(self._entries) > self._capacity:
                evicted_id, _ = self._entries.popitem(last=False)
                logger.debug(f"Session history full ({self._capacity}); evicted {evicted_id}")
                return evicted_id
            return None

    def get(self, theme_id: str) -> Optional[ThemeColorSummary]:
        with self._lock:
            return self._entries.get(theme_id)

    def items(self) -> List[Tuple[str, ThemeColorSummary]]:
        """Snapshot of (id, summary) pairs, oldest first."""
        with self._lock:
            return list(self._entries.items())

    def values(self) -> List[ThemeColorSummary]:
        with self._lock:
            return list(self._entries.values())

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._entries.keys())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, theme_id: object) -> bool:
        with self._lock:
            return theme_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())
