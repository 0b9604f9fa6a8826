"""
sessions.py — Per-Browser Visualizer Registry
==============================================
Maps a session id to its Visualizer.  The registry is bounded two ways:

  - idle sessions (not touched for `idle_ms`) are dropped on every lookup
  - at most `max_sessions` are kept; the least recently used goes first

Entries are kept in an OrderedDict in least-recently-used order, so both
prunes only ever look at the front.
"""

import logging
import threading
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from engine.timers import monotonic_ms
from engine.visualizer import Visualizer

_logger = logging.getLogger(__name__)


class SessionStore:
    """
    Attributes:
        factory      : zero-arg callable building a fresh Visualizer.
        max_sessions : Upper bound on live sessions.
        idle_ms      : Sessions untouched this long are evicted.
        clock        : zero-arg callable returning milliseconds.
    """

    def __init__(
        self,
        factory: Callable[[], Visualizer],
        max_sessions: int = 256,
        idle_ms: float = 30 * 60 * 1000,
        clock: Optional[Callable[[], float]] = None,
    ):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.factory = factory
        self.max_sessions = max_sessions
        self.idle_ms = idle_ms
        self.clock = clock or monotonic_ms
        self._entries: "OrderedDict[str, Tuple[Visualizer, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, sid: str) -> Visualizer:
        """Visualizer for `sid`, created if missing.  Marks it most recently used."""
        with self._lock:
            now = self.clock()
            self._prune_idle(now)
            entry = self._entries.get(sid)
            viz = entry[0] if entry else self.factory()
            if entry is None:
                _logger.info("new visualizer session %s", sid[:8])
            self._entries[sid] = (viz, now)
            self._entries.move_to_end(sid)
            while len(self._entries) > self.max_sessions:
                evicted, _ = self._entries.popitem(last=False)
                _logger.info("evicted session %s, store size=%d", evicted[:8], len(self._entries))
            return viz

    def __contains__(self, sid: str) -> bool:
        with self._lock:
            return sid in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _prune_idle(self, now: float) -> None:
        while self._entries:
            sid, (_, touched) = next(iter(self._entries.items()))
            if now - touched < self.idle_ms:
                break
            del self._entries[sid]
            _logger.info("dropped idle session %s", sid[:8])
