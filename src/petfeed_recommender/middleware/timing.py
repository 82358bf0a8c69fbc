"""Request timing middleware."""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

RESPONSE_TIME_HEADER = "X-Response-Time-Ms"


def elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class TimingMiddleware(BaseHTTPMiddleware):
    """Adds an X-Response-Time-Ms header and logs every completed request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        logger.debug("request_started", path=request.url.path, method=request.method)
        response = await call_next(request)
        duration_ms = elapsed_ms(start)

        response.headers[RESPONSE_TIME_HEADER] = str(duration_ms)
        logger.info(
            "request_completed",
            path=request.url.path,
            method=request.method,
            status=response.status_code,
            duration_ms=duration_ms,
        )
        return response
