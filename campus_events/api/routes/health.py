"""Health check routes for the FastAPI application."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..dependencies import get_event_service
from ... import __version__
from ...config.environment import IS_PRODUCTION_ENVIRONMENT
from ...errors import StorageError
from ...services.event_service import EventService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

@router.get("/health")
async def health_check(service: EventService = Depends(get_event_service)):
    """Health check endpoint; reports whether the database answers."""
    body = {
        "status": "healthy",
        "database": "connected",
        "environment": "production" if IS_PRODUCTION_ENVIRONMENT else "development",
        "version": __version__
    }
    try:
        await run_in_threadpool(service.health_check)
    except StorageError as e:
        logger.error(f"Health check failed: {e}")
        body.update({"status": "unhealthy", "database": "unavailable"})
        return JSONResponse(status_code=503, content=body)
    return body
