"""Per-client request limits for the write-heavy endpoints.

Submissions create a stored result each time, so they get a fixed-window
budget per client address and concrete path, compared case-insensitively.
Counters live in process memory; each worker keeps its own.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from app.api.deps import get_client_ip

logger = logging.getLogger(__name__)

PATH_PARAM = re.compile(r"\{[^/}]+\}")


@dataclass(frozen=True)
class RateLimitRule:
    """Budget for one method and path template."""

    method: str
    path: str
    requests: int
    window_seconds: int


DEFAULT_RULES: tuple[RateLimitRule, ...] = (
    RateLimitRule("POST", "/api/v1/answers/{test_name}", requests=30, window_seconds=3600),
    RateLimitRule(
        "POST", "/api/v1/answers/{test_name}/validate", requests=120, window_seconds=3600
    ),
    RateLimitRule("GET", "/api/v1/anonymous-id", requests=20, window_seconds=60),
)


def compile_path_template(template: str) -> re.Pattern[str]:
    """Regex for a route template; each ``{param}`` matches one path segment."""
    literal_parts = PATH_PARAM.split(template)
    return re.compile("^" + "[^/]+".join(map(re.escape, literal_parts)) + "$")


@dataclass(frozen=True)
class Decision:
    allowed: bool
    remaining: int
    reset_seconds: int


class FixedWindowCounter:
    """Request counts per key, reset when the key's window elapses."""

    purge_interval = 300

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        # key -> (window start, count, window length)
        self._windows: dict[str, tuple[float, int, int]] = {}
        self._last_purge = clock()

    def _purge(self, now: float) -> None:
        if now - self._last_purge < self.purge_interval:
            return
        self._windows = {
            key: window
            for key, window in self._windows.items()
            if now - window[0] < window[2]
        }
        self._last_purge = now

    def hit(self, key: str, limit: int, window_seconds: int) -> Decision:
        """Count one request against ``key`` unless its budget is spent."""
        now = self._clock()
        self._purge(now)

        started, count, _ = self._windows.get(key, (now, 0, window_seconds))
        if now - started >= window_seconds:
            started, count = now, 0

        reset = max(int(window_seconds - (now - started)), 0)
        if count >= limit:
            return Decision(allowed=False, remaining=0, reset_seconds=reset)

        self._windows[key] = (started, count + 1, window_seconds)
        return Decision(allowed=True, remaining=limit - count - 1, reset_seconds=reset)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answers 429 once a client exhausts the budget of a matching rule."""

    def __init__(
        self,
        app,
        rules: tuple[RateLimitRule, ...] | list[RateLimitRule] | None = None,
        counter: FixedWindowCounter | None = None,
        enabled: bool = True,
    ) -> None:
        super().__init__(app)
        self.enabled = enabled
        self.counter = counter or FixedWindowCounter()
        self._compiled = [
            (rule, compile_path_template(rule.path))
            for rule in (rules if rules is not None else DEFAULT_RULES)
        ]

    def match_rule(self, method: str, path: str) -> RateLimitRule | None:
        for rule, pattern in self._compiled:
            if rule.method == method and pattern.match(path):
                return rule
        return None

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.enabled:
            return await call_next(request)

        path = request.url.path
        rule = self.match_rule(request.method, path)
        if rule is None:
            return await call_next(request)

        client = get_client_ip(request) or "unknown"
        decision = self.counter.hit(
            f"{rule.method}:{path.lower()}:{client}", rule.requests, rule.window_seconds
        )
        headers = {
            "X-RateLimit-Limit": str(rule.requests),
            "X-RateLimit-Remaining": str(decision.remaining),
            "X-RateLimit-Reset": str(decision.reset_seconds),
        }

        if not decision.allowed:
            logger.warning(f"Rate limit exceeded: {request.method} {path} from {client}")
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Too many requests. Please try again later.",
                    "retry_after": decision.reset_seconds,
                },
                headers={"Retry-After": str(decision.reset_seconds), **headers},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
