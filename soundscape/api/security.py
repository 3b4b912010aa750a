"""Request guards: basic auth for the dashboard, rate limiting for intake.

Basic auth only switches on when both BASIC_AUTH_USER and BASIC_AUTH_PASS
are configured. The rate limiter is an in-process sliding window keyed by
client IP; it resets on restart and is not shared between workers.
"""

import secrets
import time
from collections import deque
from collections.abc import Callable

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from soundscape.config.settings import Settings, get_settings

# ---------------------------------------------------------------------------
# Basic auth
# ---------------------------------------------------------------------------

_basic = HTTPBasic(auto_error=False)


def _same(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


async def require_dashboard_auth(
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    settings: Settings = Depends(get_settings),
) -> None:
    if not settings.basic_auth_enabled:
        return
    if credentials is not None:
        user_ok = _same(credentials.username, settings.BASIC_AUTH_USER)
        pass_ok = _same(credentials.password, settings.BASIC_AUTH_PASS)
        if user_ok and pass_ok:
            return
    raise HTTPException(
        status_code=401,
        detail="Auth required",
        headers={"WWW-Authenticate": 'Basic realm="Secure Area"'},
    )


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------


class SlidingWindowRateLimiter:
    """Allow at most ``max_hits`` per ``window`` seconds for each key.

    Keys with no hit inside the window are dropped by a sweep that runs at
    most once per window, so memory is bounded by the keys active within
    the last two windows.
    """

    def __init__(self, max_hits: int, window: float,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self.max_hits = max_hits
        self.window = window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    @property
    def tracked_keys(self) -> int:
        return len(self._hits)

    @property
    def enabled(self) -> bool:
        return self.max_hits > 0

    def hit(self, key: str) -> bool:
        """Record a request for *key*; False when it is over the limit."""
        if not self.enabled:
            return True
        now = self._clock()
        cutoff = now - self.window
        if now - self._last_sweep >= self.window:
            self._sweep(cutoff)
            self._last_sweep = now

        q = self._hits.setdefault(key, deque())
        _prune(q, cutoff)
        if len(q) >= self.max_hits:
            return False
        q.append(now)
        return True

    def _sweep(self, cutoff: float) -> None:
        for key in list(self._hits):
            q = self._hits[key]
            _prune(q, cutoff)
            if not q:
                del self._hits[key]


def _prune(q: deque[float], cutoff: float) -> None:
    while q and q[0] <= cutoff:
        q.popleft()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


_settings = get_settings()
_submit_limiter = SlidingWindowRateLimiter(
    max_hits=_settings.RATE_LIMIT_MAX,
    window=_settings.RATE_LIMIT_WINDOW_SECONDS,
)


def get_submit_rate_limiter() -> SlidingWindowRateLimiter:
    return _submit_limiter


async def enforce_submit_rate_limit(
    request: Request,
    limiter: SlidingWindowRateLimiter = Depends(get_submit_rate_limiter),
) -> None:
    if not limiter.hit(client_ip(request)):
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please try again later.",
        )
