"""Rate Limiter — in-process sliding-window counters keyed by endpoint group and client.

Invariants:
    - Key is "<identifier>:<client_id>"; each key owns {count, reset_at}
    - The Nth request in a window is allowed iff N <= max_requests
    - A request at or after reset_at starts a fresh window with count=1
    - check() never raises and never awaits (no interleaving on the event loop)

Design Decisions:
    - Module-level limiter instance: state is per process and lost on restart
    - Injectable clock (milliseconds): tests drive time without sleeping
    - Unknown preset names fall back to "general" instead of failing open or closed
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from urbanestate.core.errors import ErrorContext, RateLimitExceededError


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int
    window_ms: int
    identifier: str = "default"


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: int  # epoch milliseconds


@dataclass
class _Window:
    count: int
    reset_at: int


RATE_LIMITS: dict[str, RateLimitConfig] = {
    "receptionist": RateLimitConfig(20, 60_000, "ai-receptionist"),
    "copilot": RateLimitConfig(10, 60_000, "ai-copilot"),
    "search": RateLimitConfig(15, 60_000, "ai-search"),
    "leads": RateLimitConfig(10, 60_000, "leads"),
    "general": RateLimitConfig(30, 60_000, "general"),
    "booking_create": RateLimitConfig(5, 15 * 60_000, "booking_create"),
    "marketplace_request_create": RateLimitConfig(
        10, 15 * 60_000, "marketplace_request_create",
    ),
}


def get_rate_limit_config(name: str) -> RateLimitConfig:
    """Resolve a preset by name, falling back to the general preset."""
    return RATE_LIMITS.get(name, RATE_LIMITS["general"])


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """Fixed-identifier sliding-window counter held in process memory."""

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def check(self, client_id: str, config: RateLimitConfig) -> RateLimitResult:
        now = self._clock()
        key = f"{config.identifier}:{client_id}"
        window = self._windows.get(key)

        if window is None or now >= window.reset_at:
            reset_at = now + config.window_ms
            self._windows[key] = _Window(count=1, reset_at=reset_at)
            return RateLimitResult(True, config.max_requests - 1, reset_at)

        if window.count >= config.max_requests:
            return RateLimitResult(False, 0, window.reset_at)

        window.count += 1
        return RateLimitResult(
            True, config.max_requests - window.count, window.reset_at,
        )

    def retry_after_seconds(self, result: RateLimitResult) -> int:
        """Seconds until the window resets, never less than 1."""
        remaining_ms = result.reset_at - self._clock()
        return max(1, math.ceil(remaining_ms / 1000))

    def sweep(self) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = self._clock()
        expired = [k for k, w in self._windows.items() if now >= w.reset_at]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def reset(self) -> None:
        self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)


rate_limiter = RateLimiter()


def enforce_rate_limit(
    client_id: str, name: str, limiter: RateLimiter | None = None,
) -> RateLimitResult:
    """Check a named preset and raise RateLimitExceededError when over budget."""
    limiter = limiter or rate_limiter
    result = limiter.check(client_id, get_rate_limit_config(name))
    if not result.allowed:
        raise RateLimitExceededError(
            limiter.retry_after_seconds(result),
            context=ErrorContext(client_id=client_id, endpoint=name),
        )
    return result
