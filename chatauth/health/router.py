"""Health domain router.

Liveness probe that also checks the user store is reachable.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from chatauth.core.constants import Routes
from chatauth.core.deps import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])


@router.get("")
async def health(session: SessionDep):
    """Report service and database status."""
    try:
        session.exec(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "error"},
        )
    return {"status": "ok", "database": "ok"}
