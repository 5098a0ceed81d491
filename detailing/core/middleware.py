# detailing/core/middleware.py
"""Request tracing and access logging"""
import time
import uuid
import logging

from starlette.requests import Request

from detailing.utils.my_logging import correlation_id_var

logger = logging.getLogger(__name__)

# Polled by load balancers; not worth an access log line each
UNLOGGED_PATHS = ("/health",)


async def correlation_id_middleware(request: Request, call_next):
    """Reuse the caller's X-Correlation-ID or mint one, and echo it back."""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = correlation_id
    token = correlation_id_var.set(correlation_id)

    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token)

    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    if request.url.path in UNLOGGED_PATHS:
        return await call_next(request)

    start_time = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start_time) * 1000

    log = logger.warning if response.status_code >= 500 else logger.info
    log(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)",
        extra={
            "client": request.client.host if request.client else "unknown",
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
    )
    return response
