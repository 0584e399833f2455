"""Events router module.

Handlers only parse requests, call the EventService and serialize results.
Service errors are mapped to status codes by the handlers registered in app.py.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, status
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from ..dependencies import get_event_service
from ...config.uploads import MAX_IMAGE_BYTES
from ...errors import ValidationError
from ...schemas.event import ImageUpload
from ...services.event_service import EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

IMAGE_FIELD = 'image'


async def read_event_request(request: Request) -> Tuple[Dict[str, Any], Optional[ImageUpload]]:
    """
    Split a multipart form (or JSON body) into event fields and an optional image.

    An empty file part, as browsers send when no file was chosen, counts as no image.
    At most MAX_IMAGE_BYTES + 1 bytes are read so oversized files are rejected
    without buffering them completely.
    """
    content_type = request.headers.get('content-type', '')

    if content_type.startswith('application/json'):
        try:
            body = await request.json()
        except ValueError as e:
            raise ValidationError(fields=['body'], details=['body: invalid JSON']) from e
        if not isinstance(body, dict):
            raise ValidationError(fields=['body'], details=['body: expected a JSON object'])
        return body, None

    fields: Dict[str, Any] = {}
    image: Optional[ImageUpload] = None
    form = await request.form()
    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == IMAGE_FIELD and value.filename:
                    data = await value.read(MAX_IMAGE_BYTES + 1)
                    if data:
                        image = ImageUpload(
                            filename=value.filename,
                            content_type=value.content_type,
                            data=data,
                        )
                continue
            fields[key] = value
    finally:
        await form.close()

    return fields, image


@router.get("", response_model=List[Dict])
@router.get("/", response_model=List[Dict], include_in_schema=False)
async def list_events(service: EventService = Depends(get_event_service)):
    """Get all events sorted by date."""
    events = await run_in_threadpool(service.list_events)
    return [event.to_dict() for event in events]


@router.get("/search", response_model=List[Dict])
async def search_events(
    query: Optional[str] = Query(None, description="Words to look for in title, description or venue"),
    service: EventService = Depends(get_event_service)
):
    """Search events by relevance."""
    events = await run_in_threadpool(service.search_events, query)
    return [event.to_dict() for event in events]


@router.get("/{event_id}", response_model=Dict)
async def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    """Get a single event by ID."""
    event = await run_in_threadpool(service.get_event, event_id)
    return event.to_dict()


@router.post("", response_model=Dict, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_event(request: Request, service: EventService = Depends(get_event_service)):
    """Create an event from form fields and an optional `image` file."""
    fields, image = await read_event_request(request)
    event = await run_in_threadpool(service.create_event, fields, image)
    return event.to_dict()


@router.put("/{event_id}", response_model=Dict)
async def update_event(
    event_id: str,
    request: Request,
    service: EventService = Depends(get_event_service)
):
    """Update an event; only supplied fields change, a new `image` replaces the old one."""
    fields, image = await read_event_request(request)
    event = await run_in_threadpool(service.update_event, event_id, fields, image)
    return event.to_dict()


@router.delete("/{event_id}", response_model=Dict)
async def delete_event(event_id: str, service: EventService = Depends(get_event_service)):
    """Delete an event and its image."""
    return await run_in_threadpool(service.delete_event, event_id)
