"""
Request logging middleware with correlation IDs.

Each request gets a correlation ID bound to the structlog context, so events
logged while issuing or verifying challenges carry it. An inbound
X-Correlation-ID is reused when it looks like one of ours (8-32 hex chars).

Never logs IPs, query strings, tokens or nonces.
"""

import re
import secrets
import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-ID"
_CORRELATION_ID_RE = re.compile(r"^[a-f0-9]{8,32}$")


def generate_correlation_id() -> str:
    """Generate an 8-character correlation ID."""
    return secrets.token_hex(4)


def resolve_correlation_id(request: Request) -> str:
    inbound = request.headers.get(CORRELATION_HEADER, "")
    if _CORRELATION_ID_RE.match(inbound):
        return inbound
    return generate_correlation_id()


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = resolve_correlation_id(request)
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
        logger = structlog.get_logger()

        logger.info("request_started", method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                exc_info=True,
            )
            raise

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
