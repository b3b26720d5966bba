"""Health check endpoint.

Returns service status including database connectivity and the state of the
counter sync scheduler.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.db.supabase import get_supabase
from app.scheduler.jobs import is_scheduler_running

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return 200 OK when Supabase answers, 503 otherwise."""
    db_status = "disconnected"

    try:
        client = get_supabase()
        result = client.table("campaigns").select("id").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "scheduler": "running" if is_scheduler_running() else "stopped",
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
