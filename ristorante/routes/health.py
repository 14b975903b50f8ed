"""
Ristorante API: Health Check Route
===================================

What:  `GET /api/health` → {"ok": true, "db": <bool>}
How:   Runs SELECT 1 on a pooled connection. An unreachable database is
       reported as db=false with a warning, not as a 500; an unconfigured
       one answers 500 like every other database route.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text

from ristorante.database import Database, get_database
from ristorante.http import json_response
from ristorante.schemas.common import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"description": "DATABASE_URL missing", "model": ErrorResponse}},
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)):
    db_ok = False
    try:
        async with database.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            db_ok = result.scalar() == 1
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))

    return json_response(HealthResponse(ok=True, db=db_ok))
