from __future__ import annotations

import time
from typing import Callable, Optional

from inventory_health.config import get_config


class SearchDebouncer:
    """Timer-gated commit step for the search box.

    Keystrokes go to update(); the effective term only changes once the input
    has been quiet for a full window. The clock is injectable so callers can
    drive it without sleeping.
    """
    def __init__(
        self,
        window_ms: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        initial: str = "",
    ) -> None:
        window_ms = get_config().search_debounce_ms if window_ms is None else window_ms
        self.window = window_ms / 1000.0
        self._clock = clock
        self._effective = initial
        self._pending: Optional[str] = None
        self._changed_at = 0.0

    @property
    def effective_term(self) -> str:
        return self._effective

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def update(self, term: str) -> None:
        """Record raw input; restarts the quiet window."""
        if term == self._effective and self._pending is None:
            return
        self._pending = term
        self._changed_at = self._clock()

    def remaining(self) -> float:
        """Seconds until the pending term may be committed (0 when nothing is pending)."""
        if self._pending is None:
            return 0.0
        return max(0.0, self.window - (self._clock() - self._changed_at))

    def poll(self) -> str:
        """Commit the pending term if its window has elapsed; return the effective term."""
        if self._pending is not None and self.remaining() == 0.0:
            self._effective = self._pending
            self._pending = None
        return self._effective

    def flush(self) -> str:
        """Commit the pending term immediately."""
        if self._pending is not None:
            self._effective = self._pending
            self._pending = None
        return self._effective
