"""
Ristorante API: CORS Middleware
================================

What:  Fixed, permissive CORS policy for the public website and admin panel.
How:   Any OPTIONS request, to any path (defined or not), is answered with an
       empty 204 carrying only the CORS headers; no route, dependency or
       authorization check runs. Every other response gets the same headers
       stamped on.

Starlette's CORSMiddleware is not used: it only treats requests carrying
Origin and Access-Control-Request-Method as preflights, answers them with
200, and lets other OPTIONS requests reach the router.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ristorante.http import CORS_HEADERS


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Short-circuits preflights and adds CORS headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=dict(CORS_HEADERS))

        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response
