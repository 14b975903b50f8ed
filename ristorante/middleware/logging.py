"""
Ristorante API: Access Log Middleware
======================================

What:  One log line per HTTP request: method, path, status, duration,
       audience (public or admin), request ID and client IP.
How:   Times the downstream call and picks the level from the status class
       and the kind of traffic:

           5xx                        → ERROR
           4xx                        → WARNING
           2xx/3xx on /img/...        → DEBUG (a gallery page pulls dozens)
           everything else            → INFO

Admin calls are tagged so changes to the menu, reservations and pages can
be filtered out of the access log.

Never logged: request bodies (reservations carry names and phone numbers)
and the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ristorante.middleware.request_id import request_id_var

logger = logging.getLogger("ristorante.access")

ADMIN_PREFIX = "/api/admin/"
IMAGE_PREFIX = "/img/"


def access_level(path: str, status: int) -> int:
    """Log level for one request line."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if path.startswith(IMAGE_PREFIX):
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Typical durations:
        - OPTIONS preflight: <1ms (answered before routing)
        - GET /api/menu: 5-30ms (one SELECT)
        - GET /img/...: depends on the object store round trip
    """

    # Probed every few seconds by the platform; not worth a log line each
    QUIET_PATHS = {"/api/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        level = access_level(path, status)
        if not logger.isEnabledFor(level):
            return response

        audience = "admin" if path.startswith(ADMIN_PREFIX) else "public"
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        logger.log(
            level,
            "%s %s %d %.1fms %s [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            audience,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "audience": audience,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
