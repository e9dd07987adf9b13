"""
SeaFood Delivery Backend — Health Check Route
==============================================

What:  Liveness/readiness probe for the orchestrator.
How:   Runs the database probe (SELECT 1) once, without the startup retry:
       a probe that waits on backoff would time out at the load balancer.
       Healthy → 200. Database down → 503 so traffic is routed away.
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from tenacity import stop_after_attempt

from seafood import __version__
from seafood.database import ping_database
from seafood.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check():
    db_status = "connected"
    overall = "healthy"

    try:
        await ping_database.retry_with(stop=stop_after_attempt(1))()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall != "healthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
