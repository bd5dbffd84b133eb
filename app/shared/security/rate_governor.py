"""
Sliding-window request governor.

Tracks admission timestamps per caller key and answers admit/deny
decisions. State lives in process memory only; running several
workers gives each its own budget.
"""

import threading
import time
from collections.abc import Hashable
from typing import Callable, Optional

from app.domain.market.entities import RateDecision
from app.domain.market.errors import ExhaustedError

DEFAULT_LIMIT = 60
DEFAULT_WINDOW_MS = 60_000

# Requests without an identifiable caller share this bucket.
SHARED_KEY = "default"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class RateGovernor:
    """Per-key sliding-window rate governor.

    A key's log holds the epoch-millisecond timestamps of its admitted
    requests. Entries older than ``now - window`` are purged lazily
    whenever the key is touched, and in bulk by :meth:`sweep`.

    Args:
        default_limit: Requests allowed per window when none is given.
        default_window_ms: Window length in milliseconds when none is given.
        clock: Epoch-millisecond time source.
    """

    def __init__(
        self,
        default_limit: int = DEFAULT_LIMIT,
        default_window_ms: int = DEFAULT_WINDOW_MS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.default_limit = default_limit
        self.default_window_ms = default_window_ms
        self._clock = clock
        self._requests: dict[Hashable, list[int]] = {}
        self._windows: dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def admit(
        self,
        key: Optional[Hashable] = None,
        limit: Optional[int] = None,
        window_ms: Optional[int] = None,
    ) -> RateDecision:
        """Record a request for ``key`` if it still has capacity.

        Args:
            key: Caller identity; ``None`` uses the shared bucket.
            limit: Requests allowed per window. ``<= 0`` always denies.
            window_ms: Window length in milliseconds.

        Returns:
            The decision, with the capacity left after this request.
        """
        key = SHARED_KEY if key is None else key
        limit = self.default_limit if limit is None else limit
        window_ms = self.default_window_ms if window_ms is None else window_ms

        with self._lock:
            now = self._clock()
            log = self._purge(key, now, window_ms)

            if limit - len(log) > 0:
                log.append(now)
                self._requests[key] = log
                self._windows[key] = window_ms
                return RateDecision(
                    allowed=True,
                    remaining=limit - len(log),
                    reset_at=self._reset_at(log, window_ms),
                )

            return RateDecision(
                allowed=False,
                remaining=0,
                reset_at=self._reset_at(log, window_ms),
            )

    def enforce(
        self,
        key: Optional[Hashable] = None,
        limit: Optional[int] = None,
        window_ms: Optional[int] = None,
    ) -> RateDecision:
        """Admit a request or raise.

        Raises:
            ExhaustedError: If ``key`` has no capacity left in the window.
        """
        decision = self.admit(key, limit, window_ms)
        if not decision.allowed:
            raise ExhaustedError(
                str(SHARED_KEY if key is None else key), decision.reset_at
            )
        return decision

    def now(self) -> int:
        """Current time in epoch milliseconds, from the governor's clock."""
        return self._clock()

    def remaining(
        self,
        key: Optional[Hashable] = None,
        limit: Optional[int] = None,
        window_ms: Optional[int] = None,
    ) -> RateDecision:
        """Report capacity for ``key`` without recording a request."""
        key = SHARED_KEY if key is None else key
        limit = self.default_limit if limit is None else limit
        window_ms = self.default_window_ms if window_ms is None else window_ms

        with self._lock:
            if key not in self._requests:
                return RateDecision(
                    allowed=limit > 0, remaining=max(0, limit), reset_at=None
                )
            log = self._purge(key, self._clock(), window_ms)
            left = max(0, limit - len(log))
            return RateDecision(
                allowed=left > 0,
                remaining=left,
                reset_at=self._reset_at(log, window_ms),
            )

    def reset(self) -> None:
        """Forget every key."""
        with self._lock:
            self._requests.clear()
            self._windows.clear()

    def sweep(self) -> int:
        """Prune every key's log and drop the ones left empty.

        Each key is pruned with the window it was last admitted under.
        Meant for periodic background use to bound memory.

        Returns:
            Number of keys dropped.
        """
        dropped = 0
        with self._lock:
            now = self._clock()
            for key in list(self._requests):
                window_ms = self._windows.get(key, self.default_window_ms)
                if not self._purge(key, now, window_ms):
                    del self._requests[key]
                    self._windows.pop(key, None)
                    dropped += 1
        return dropped

    def __len__(self) -> int:
        return len(self._requests)

    # ------------------------------------------------------------------ #
    # Internal helpers (caller holds the lock)
    # ------------------------------------------------------------------ #

    def _purge(self, key: Hashable, now: int, window_ms: int) -> list[int]:
        cutoff = now - window_ms
        log = [ts for ts in self._requests.get(key, ()) if ts >= cutoff]
        if key in self._requests:
            self._requests[key] = log
        return log

    @staticmethod
    def _reset_at(log: list[int], window_ms: int) -> Optional[int]:
        if not log:
            return None
        return min(log) + window_ms
