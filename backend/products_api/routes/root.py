"""
Products API - Root and Health Routes
=====================================

What:  Plain-text welcome at / and a JSON health check at /health.
Who:   Humans poking the service, container health checks, load balancers.
"""

import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from products_api import __version__
from products_api.dependencies import get_store
from products_api.schemas.product import HealthResponse
from products_api.services.product_store import ProductStore

router = APIRouter(tags=["Root"])

WELCOME_MESSAGE = "Welcome to the Products API"


@router.get("/", response_class=PlainTextResponse, summary="Welcome message")
async def root() -> str:
    return WELCOME_MESSAGE


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    request: Request,
    store: ProductStore = Depends(get_store),
) -> HealthResponse:
    """
    The store lives in process memory, so a responding process is healthy.
    Reports the record count and uptime for monitoring.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        products=len(store),
        uptime_seconds=round(time.time() - request.app.state.started_at, 2),
    )
