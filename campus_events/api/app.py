"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# Internal imports
from ..config.environment import IS_PRODUCTION_ENVIRONMENT, UPLOAD_DIR
from ..config.cors import CORS_CONFIG
from ..config.uploads import UPLOAD_URL_PREFIX
from ..utils.logging_config import setup_logging
from ..db import Database, DatabaseConfig, EventStore
from ..errors import (
    EventNotFoundError,
    EventServiceError,
    InvalidArgumentError,
    InvalidUploadError,
    StorageUnavailableError,
    ValidationError,
)
from ..services.event_service import EventService
from ..storage.blob_store import BlobStore
from .. import __version__
from .routes import events, health

logger = logging.getLogger(__name__)

CLIENT_ERRORS = (ValidationError, InvalidArgumentError, InvalidUploadError)


def error_status(exc: EventServiceError) -> int:
    """HTTP status for a service error."""
    if isinstance(exc, CLIENT_ERRORS):
        return 400
    if isinstance(exc, EventNotFoundError):
        return 404
    return 500


async def handle_service_error(request: Request, exc: EventServiceError) -> JSONResponse:
    status_code = error_status(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        message = (
            "Storage engine unavailable"
            if isinstance(exc, StorageUnavailableError)
            else "Error processing request"
        )
        return JSONResponse(
            status_code=status_code,
            content={"message": message, "code": exc.code.value},
        )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Something went wrong!"})


def create_application(
    database: Optional[Database] = None,
    blob_store: Optional[BlobStore] = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database: Database handle to use; built from the environment at startup if omitted
        blob_store: Image store to use; defaults to UPLOAD_DIR

    The database handle is created (or adopted) in the lifespan and disposed on shutdown.
    """
    upload_dir: Path = blob_store.directory if blob_store else UPLOAD_DIR

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        # Startup
        db = database or Database(DatabaseConfig())
        try:
            db.ensure_tables_exist()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            db.dispose()
            raise
        blobs = blob_store or BlobStore(upload_dir)
        app.state.database = db
        app.state.event_service = EventService(EventStore(db), blobs)
        yield
        # Shutdown
        db.dispose()

    app = FastAPI(
        title="College Events API",
        description="Create, search and manage college events with optional images",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    # Map service errors to JSON responses
    app.add_exception_handler(EventServiceError, handle_service_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix="/api")

    # Uploaded images, read-only; the directory is created at startup
    app.mount(
        UPLOAD_URL_PREFIX,
        StaticFiles(directory=upload_dir, check_dir=False),
        name="uploads"
    )

    return app


setup_logging()

# Create the application instance
app = create_application()
