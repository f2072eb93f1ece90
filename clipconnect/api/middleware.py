"""Per-client rate limiting."""

import logging
import threading
import time
from collections import deque
from typing import Callable, Iterable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

EXEMPT_PATHS = {"/", "/health"}


class SlidingWindow:
    """Recent hit times per client over a one-minute window.

    Clients with no hit inside the window are dropped on each sweep, so
    memory is bounded by the clients seen during the last minute.
    """

    def __init__(
        self,
        limit: int,
        burst: int,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.burst = burst
        self.window = window
        self._clock = clock
        self._hits: dict[str, deque] = {}
        self._next_sweep = clock() + window
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._hits)

    def hit(self, client: str) -> int:
        """Record a hit. Returns 0 when allowed, else seconds to wait."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)

            hits = self._hits.setdefault(client, deque())
            while hits and hits[0] <= now - self.window:
                hits.popleft()

            if len(hits) >= self.limit:
                return int(hits[0] + self.window - now) + 1
            if len(hits) >= self.burst and hits[-self.burst] > now - 1:
                return 1

            hits.append(now)
            return 0

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window
        stale = [client for client, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for client in stale:
            del self._hits[client]
        self._next_sweep = now + self.window


def client_address(request: Request, trusted_proxies: Iterable[str] = ()) -> str:
    """Peer address, or the first untrusted X-Forwarded-For hop behind a trusted proxy."""
    peer = request.client.host if request.client else "unknown"
    trusted = set(trusted_proxies)
    if peer not in trusted:
        return peer

    forwarded = request.headers.get("X-Forwarded-For", "")
    for hop in reversed([h.strip() for h in forwarded.split(",") if h.strip()]):
        if hop not in trusted:
            return hop
    return peer


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answer 429 once a client exceeds its per-minute or per-second budget.

    Counts are in-process: each worker process keeps its own.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: int = 100,
        burst_limit: int = 20,
        trusted_proxies: Iterable[str] = (),
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.window = SlidingWindow(requests_per_minute, burst_limit, clock=clock)
        self.trusted_proxies = tuple(trusted_proxies)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client = client_address(request, self.trusted_proxies)
        retry_after = self.window.hit(client)
        if retry_after:
            logger.warning("Rate limit exceeded for %s on %s", client, request.url.path)
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests"},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
