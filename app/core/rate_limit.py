"""클라이언트별 슬라이딩 윈도우 요청 제한."""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, status
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.config import Settings
from app.core.logger import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    """단일 요청에 대한 허용 여부."""

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int


class SlidingWindowRateLimiter:
    """키(클라이언트 IP)별로 최근 `window_seconds` 동안의 요청 시각을 기록합니다.

    윈도우 안에 `max_requests`개 이상의 기록이 있으면 요청을 거절하며,
    거절된 요청은 기록하지 않습니다.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Clock = time.monotonic) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = float(window_seconds)
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_purge = clock()

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = time.monotonic) -> SlidingWindowRateLimiter:
        """애플리케이션 설정으로 리미터를 생성합니다."""
        return cls(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            clock=clock,
        )

    def hit(self, key: str) -> RateLimitDecision:
        """요청 한 건을 기록하고 허용 여부를 반환합니다."""
        now = self._clock()
        with self._lock:
            if now - self._last_purge >= self.window_seconds:
                self._purge_locked(now)
            hits = self._hits.setdefault(key, deque())
            self._evict(hits, now)

            if len(hits) >= self.max_requests:
                retry_after = hits[0] + self.window_seconds - now
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    retry_after_seconds=max(1, math.ceil(retry_after)),
                )

            hits.append(now)
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - len(hits),
                retry_after_seconds=0,
            )

    def purge(self) -> int:
        """윈도우가 모두 지난 키를 제거하고 제거한 키 수를 반환합니다."""
        now = self._clock()
        with self._lock:
            return self._purge_locked(now)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    def _purge_locked(self, now: float) -> int:
        for hits in self._hits.values():
            self._evict(hits, now)
        stale = [key for key, hits in self._hits.items() if not hits]
        for key in stale:
            del self._hits[key]
        self._last_purge = now
        return len(stale)

    def _evict(self, hits: deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()


def client_key(request: Request) -> str:
    """요청 클라이언트 식별자(IP)를 반환합니다."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """`path_prefix` 아래 요청에만 리미터를 적용합니다. 거절 시 라우팅 전에 429를 반환합니다."""

    def __init__(self, app, limiter: SlidingWindowRateLimiter, path_prefix: str = "/api/") -> None:
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        key = client_key(request)
        decision = self.limiter.hit(key)
        if not decision.allowed:
            logger.warning("Rate limit exceeded: client=%s path=%s", key, request.url.path)
            return PlainTextResponse(
                RATE_LIMIT_MESSAGE,
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={
                    "Retry-After": str(decision.retry_after_seconds),
                    "X-RateLimit-Limit": str(decision.limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(decision.limit)
        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        return response
