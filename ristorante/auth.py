"""
Ristorante API: Admin Authorization Guard
==========================================

What:  Static shared-secret check for admin routes.
How:   `Authorization: Bearer <token>` is compared byte-for-byte with
       ADMIN_TOKEN. Admin routers declare `Depends(require_admin)`, which
       runs before the handler and therefore before any database or
       object-store call.

There is no session, no signed token, no per-admin identity and no rate
limiting. An empty ADMIN_TOKEN locks every admin route.
"""

import hmac
import logging

from fastapi import Request

from ristorante.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def is_admin(request: Request) -> bool:
    """True when the request carries the configured admin token."""
    expected = request.app.state.settings.admin_token
    if not expected:
        return False

    header = request.headers.get("authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return False
    supplied = header[len(BEARER_PREFIX):]

    # compare_digest only accepts ASCII str, so compare the encoded bytes
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def require_admin(request: Request) -> None:
    """
    Router dependency for admin routes.

    Raises:
        UnauthorizedError: → 401 {"error": "Unauthorized"}
    """
    if not is_admin(request):
        logger.warning("Rejected admin request: %s %s", request.method, request.url.path)
        raise UnauthorizedError(context={"path": request.url.path})
