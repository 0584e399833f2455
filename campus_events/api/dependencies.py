"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from ..services.event_service import EventService


def get_event_service(request: Request) -> EventService:
    """Return the service built for this application instance during startup."""
    return request.app.state.event_service
