"""Request middleware: request context, access logging and rate limiting."""

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response, status
from fastapi.responses import ORJSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from postboard.core.context import (
    clear_context,
    set_request_id,
    set_trace_id,
    set_user_id,
)
from postboard.core.redis import get_redis


logger = structlog.get_logger(__name__)


def get_client_ip(
    request: Request,
    trusted_hosts: list[str] | None = None,
) -> str | None:
    """Get the client IP address.

    ``X-Forwarded-For`` and ``X-Real-IP`` are only read when the direct peer
    is one of ``trusted_hosts``; any other caller could set them freely.
    """
    direct_ip = request.client.host if request.client else None
    trusted = trusted_hosts or []

    if direct_ip is None or direct_ip not in trusted:
        return direct_ip

    forwarded_for = request.headers.get("x-forwarded-for", "")
    if forwarded_for:
        # First hop that is not one of our proxies is the client
        ips = [ip.strip() for ip in forwarded_for.split(",") if ip.strip()]
        client_ips = [ip for ip in ips if ip not in trusted]
        if client_ips:
            return client_ips[0]

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return direct_ip


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Set up request context for logging.

    Generates or propagates ``X-Request-ID``, extracts a trace id from
    distributed tracing headers, logs request start/finish with timing and
    clears the context once the response is produced.
    """

    REQUEST_ID_HEADER = "X-Request-ID"
    TRACE_ID_HEADER = "X-Trace-ID"
    TRACEPARENT_HEADER = "traceparent"

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
        trusted_hosts: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = exclude_paths or ["/health", "/api/check"]
        self.trusted_hosts = trusted_hosts or []

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start_time = time.perf_counter()

        request_id = set_request_id(request.headers.get(self.REQUEST_ID_HEADER))
        trace_id = request.headers.get(self.TRACE_ID_HEADER) or self._extract_traceparent(
            request.headers.get(self.TRACEPARENT_HEADER)
        )
        if trace_id:
            set_trace_id(trace_id)

        request.state.request_id = request_id

        should_log = self.log_requests and not self._should_exclude(request.url.path)
        if should_log:
            logger.info(
                "request_started",
                method=request.method,
                path=request.url.path,
                query=str(request.query_params) if request.query_params else None,
                client_ip=get_client_ip(request, self.trusted_hosts),
            )

        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000

            if should_log:
                log_method = (
                    logger.warning if response.status_code >= 400 else logger.info
                )
                log_method(
                    "request_completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 2),
                )

            response.headers[self.REQUEST_ID_HEADER] = request_id
            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
                duration_ms=round(duration_ms, 2),
            )
            raise

        finally:
            clear_context()

    def _should_exclude(self, path: str) -> bool:
        return any(path.startswith(excluded) for excluded in self.exclude_paths)

    def _extract_traceparent(self, traceparent: str | None) -> str | None:
        """Extract the trace id from a W3C ``traceparent`` header.

        Format: {version}-{trace-id}-{parent-id}-{trace-flags}
        """
        if not traceparent:
            return None
        parts = traceparent.split("-")
        if len(parts) >= 2:
            return parts[1]
        return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window request limiter per client IP, counted in Redis.

    Every request increments ``ratelimit:<ip>:<window>``; the key expires
    with the window. Once the count passes ``max_requests`` the request is
    answered with 429 and a ``Retry-After`` header. Without a Redis client
    requests pass through unthrottled.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int = 100,
        window_seconds: int = 900,
        exclude_paths: list[str] | None = None,
        trusted_hosts: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.exclude_paths = exclude_paths or ["/health", "/api/check"]
        self.trusted_hosts = trusted_hosts or []

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        redis_client = get_redis()
        if redis_client is None or any(
            request.url.path.startswith(p) for p in self.exclude_paths
        ):
            return await call_next(request)

        now = int(time.time())
        window = now // self.window_seconds
        client_ip = get_client_ip(request, self.trusted_hosts) or "unknown"
        key = f"ratelimit:{client_ip}:{window}"

        try:
            pipe = redis_client.pipeline()
            pipe.incr(key)
            pipe.expire(key, self.window_seconds)
            count, _ = await pipe.execute()
        except RedisError as e:
            logger.warning("rate_limit_unavailable", error=str(e))
            return await call_next(request)

        if int(count) > self.max_requests:
            retry_after = (window + 1) * self.window_seconds - now
            logger.warning(
                "rate_limit_exceeded",
                client_ip=client_ip,
                count=count,
                limit=self.max_requests,
            )
            return ORJSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": True,
                    "message": "Too many requests, please try again later.",
                    "status_code": status.HTTP_429_TOO_MANY_REQUESTS,
                    "request_id": getattr(request.state, "request_id", None),
                },
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)


def set_user_context(user_id: str | None) -> None:
    """Include the authenticated user's id in all subsequent logs."""
    set_user_id(user_id)


__all__ = [
    "RateLimitMiddleware",
    "RequestContextMiddleware",
    "get_client_ip",
    "set_user_context",
]
