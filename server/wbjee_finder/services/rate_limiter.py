"""Fixed-window, per-client rate limiting kept in process memory."""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitConfig:
    """How many requests a client may make per window."""
    max_requests: int = 100
    window_seconds: int = 900


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single rate limit check."""
    allowed: bool
    limit: int
    remaining: int
    reset_after: int  # seconds until the window resets

    @property
    def retry_after(self) -> Optional[int]:
        return None if self.allowed else self.reset_after


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    """Count requests per identifier inside fixed windows.

    A window opens on a client's first request and lasts
    ``config.window_seconds``; the count resets when it closes.
    """

    def __init__(self, config: RateLimitConfig, clock: Optional[Callable[[], float]] = None):
        if config.max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if config.window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.config = config
        self._clock = clock or time.monotonic
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def _expired(self, window: _Window, now: float) -> bool:
        return now - window.started_at >= self.config.window_seconds

    def check(self, identifier: str) -> RateLimitResult:
        """Record one request for ``identifier`` and decide whether it may proceed."""
        with self._lock:
            now = self._clock()
            window = self._windows.get(identifier)
            if window is None or self._expired(window, now):
                window = _Window(started_at=now)
                self._windows[identifier] = window

            window.count += 1
            limit = self.config.max_requests
            reset_after = math.ceil(window.started_at + self.config.window_seconds - now)

            return RateLimitResult(
                allowed=window.count <= limit,
                limit=limit,
                remaining=max(limit - window.count, 0),
                reset_after=max(reset_after, 0),
            )

    def prune(self) -> None:
        """Drop windows that have already closed."""
        with self._lock:
            now = self._clock()
            stale = [key for key, window in self._windows.items() if self._expired(window, now)]
            for key in stale:
                del self._windows[key]

        if stale:
            logger.debug("Pruned %d closed rate limit windows", len(stale))

    def reset(self, identifier: Optional[str] = None) -> None:
        """Forget one client's window, or every window when no identifier is given."""
        with self._lock:
            if identifier is None:
                self._windows.clear()
            else:
                self._windows.pop(identifier, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
