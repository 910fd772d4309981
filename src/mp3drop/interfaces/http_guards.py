"""Process-wide HTTP guards: security headers and request rate limiting."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

SECURITY_HEADERS: dict[str, str] = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
    "Content-Security-Policy": (
        "default-src 'self'; base-uri 'self'; font-src 'self' https: data:; "
        "form-action 'self'; frame-ancestors 'self'; img-src 'self' data:; "
        "object-src 'none'; script-src 'self'; script-src-attr 'none'; "
        "style-src 'self' https:; upgrade-insecure-requests"
    ),
    "X-DNS-Prefetch-Control": "on",
    "Cross-Origin-Embedder-Policy": "require-corp",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

_UNDISCLOSED_HEADERS = ("server", "x-powered-by")


def apply_security_headers(headers) -> None:
    for header in _UNDISCLOSED_HEADERS:
        if header in headers:
            del headers[header]
    for name, value in SECURITY_HEADERS.items():
        headers[name] = value


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after_seconds: int


@dataclass(slots=True)
class FixedWindowRateLimiter:
    """Count requests per client key within fixed windows of ``window_seconds``."""

    limit: int = 30
    window_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic
    _windows: dict[str, tuple[float, int]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def hit(self, key: str) -> RateLimitDecision:
        now = self.clock()
        with self._lock:
            window_start, count = self._windows.get(key, (now, 0))
            if now - window_start >= self.window_seconds:
                window_start, count = now, 0
            count += 1
            self._windows[key] = (window_start, count)
            self._evict_expired(now)

        if count > self.limit:
            retry_after = math.ceil(window_start + self.window_seconds - now)
            return RateLimitDecision(allowed=False, remaining=0, retry_after_seconds=max(retry_after, 1))
        return RateLimitDecision(allowed=True, remaining=self.limit - count, retry_after_seconds=0)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]
