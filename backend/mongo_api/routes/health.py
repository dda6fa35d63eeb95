"""
Mongo API — Health Check Route
===============================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings MongoDB through the shared client and, when it answers,
       reports how many users are stored.
Who:   Docker health checks, load balancers, monitoring systems.

Status levels:
    - healthy:   MongoDB answered the ping (HTTP 200)
    - unhealthy: MongoDB unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mongo_api import __version__
from mongo_api.database import Stores, get_stores, ping
from mongo_api.exceptions import StoreError
from mongo_api.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def _user_count(stores: Stores) -> Optional[int]:
    # A failed count does not make the service unhealthy; the ping decides
    try:
        return await stores.users.count()
    except StoreError:
        return None


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(stores: Stores = Depends(get_stores)) -> JSONResponse:
    connected = await ping(stores.client)
    body = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        users=await _user_count(stores) if connected else None,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if connected else 503, content=body.model_dump())
