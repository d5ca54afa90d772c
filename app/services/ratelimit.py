"""Fixed-window request limits keyed by scope and client address, backed by ``limits``."""
from __future__ import annotations

import math
import time
from functools import lru_cache

from limits import RateLimitItem, parse
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter

from app.core.errors import RateLimitedError

SCOPE_MESSAGES = {
    "auth": "Too many attempts, please try again later",
    "otp": "Too many OTP requests, please try again later",
}


@lru_cache(maxsize=None)
def parse_rule(rule: str) -> RateLimitItem:
    """``"5/15minutes"`` -> 5 hits per 15-minute window."""
    return parse(rule)


class RateLimiter:
    """Process-local unless given shared ``storage``; each worker keeps its own counters otherwise."""

    def __init__(self, storage: Storage | None = None):
        self.storage = storage or MemoryStorage()
        self.strategy = FixedWindowRateLimiter(self.storage)

    def hit(self, scope: str, key: str, rule: str) -> None:
        """Record one hit; raise ``RateLimitedError`` once ``rule`` is exceeded."""
        item = parse_rule(rule)
        if self.strategy.hit(item, scope, key):
            return

        reset_at, _ = self.strategy.get_window_stats(item, scope, key)
        retry_after = max(1, math.ceil(reset_at - time.time()))
        raise RateLimitedError(SCOPE_MESSAGES.get(scope), retry_after=retry_after)

    def reset(self) -> None:
        self.storage.reset()
