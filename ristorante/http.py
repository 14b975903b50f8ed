"""
Ristorante API: Response Shaping and Body Parsing
==================================================

What:  The fixed CORS header set, the JSON response shaper used by every
       error path, and the raw-body JSON readers used by handlers.
How:   Handlers read bodies themselves instead of declaring Pydantic body
       parameters. Each handler picks whether a malformed body is tolerated
       or rejected, and every failure keeps the `{"error": ...}` shape.
"""

import json
import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ristorante.exceptions import NotFoundError, ValidationError
from ristorante.schemas.base import PG_INT_MAX

logger = logging.getLogger(__name__)

# Attached to every response, including 204 preflights and image bytes.
CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET,POST,PUT,DELETE,OPTIONS",
    "access-control-allow-headers": "content-type,authorization",
}


def json_response(data: Any, status_code: int = 200) -> JSONResponse:
    """
    Wraps `data` into a JSON response with the CORS headers.

    Datetimes, enums and Pydantic models are converted by jsonable_encoder.
    """
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(data),
        headers=dict(CORS_HEADERS),
    )


def error_response(message: str, status_code: int) -> JSONResponse:
    """`{"error": message}` with the given status."""
    return json_response({"error": message}, status_code=status_code)


async def _decode_json(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        raise ValueError("empty body")
    return json.loads(raw)


async def read_json_object(request: Request, *, tolerant: bool = False) -> dict:
    """
    Reads the body as a JSON object.

    A JSON value that is not an object yields `{}`. A body that is not valid
    JSON yields `{}` when `tolerant` is set; otherwise it is rejected.

    Raises:
        ValidationError: invalid JSON and not tolerant (→ 400 "invalid JSON body")
    """
    try:
        body = await _decode_json(request)
    except ValueError:
        if tolerant:
            return {}
        raise ValidationError(message="invalid JSON body", field="body")
    return body if isinstance(body, dict) else {}


async def read_json_value(request: Request) -> Optional[Any]:
    """Reads any JSON value; a missing or malformed body reads as None."""
    try:
        return await _decode_json(request)
    except ValueError:
        logger.debug("Ignoring malformed JSON body on %s", request.url.path)
        return None


# Postgres SERIAL upper bound; larger ids cannot exist
MAX_RECORD_ID = PG_INT_MAX


def parse_record_id(raw: str, resource: str) -> int:
    """
    Converts an `{id}` path segment to an int.

    Anything that is not a positive decimal integer within the SERIAL range
    cannot name a record, so it gets the same 404 as a missing one.

    Raises:
        NotFoundError
    """
    if raw.isascii() and raw.isdigit():
        value = int(raw)
        if 0 < value <= MAX_RECORD_ID:
            return value
    raise NotFoundError(resource=resource, resource_id=raw)
