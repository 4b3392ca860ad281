"""
Storefront Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings both collection files and checks the upload directory.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   both collections reachable, uploads writable (HTTP 200)
    - unhealthy: anything else (HTTP 503)
"""

import logging
import os
import time

from fastapi import APIRouter, Depends, Response

from storefront import __version__
from storefront.database import Datastore
from storefront.dependencies import get_datastore, get_upload_service
from storefront.schemas.common import HealthResponse
from storefront.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A dependency is unavailable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    datastore: Datastore = Depends(get_datastore),
    uploads: UploadService = Depends(get_upload_service),
) -> HealthResponse:
    products_status = "connected" if await datastore.products.ping() else "disconnected"
    orders_status = "connected" if await datastore.orders.ping() else "disconnected"

    upload_dir = uploads.upload_dir
    uploads_status = "writable" if upload_dir.is_dir() and os.access(upload_dir, os.W_OK) else "unavailable"
    if uploads_status != "writable":
        logger.warning("Health check: upload directory unavailable: %s", upload_dir)

    healthy = (products_status, orders_status, uploads_status) == ("connected", "connected", "writable")
    if not healthy:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        products_store=products_status,
        orders_store=orders_status,
        uploads=uploads_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
