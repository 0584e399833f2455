"""Event service - all business logic lives here.

The service:
- Validates request fields and uploads before touching storage
- Owns the image lifecycle (no orphaned files, no dangling references)
- Translates search queries for the store's text index
- Raises errors from campus_events.errors; the HTTP layer maps them to status codes
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from ..db.event_store import EventStore
from ..errors import (
    BlobStoreError,
    EventNotFoundError,
    InvalidArgumentError,
    InvalidUploadError,
    StorageError,
)
from ..models import Event
from ..schemas.event import ImageUpload, validate_fields
from ..storage.blob_store import BlobStore
from .image_validation import validate_image

logger = logging.getLogger(__name__)

_WORD = re.compile(r'\w+', re.UNICODE)


def search_terms(query: str) -> List[str]:
    """Split a free-text query into word tokens for the text index."""
    return _WORD.findall(query)


class EventService:
    """Service for event CRUD, search and image handling.

    Example usage:
        service = EventService(EventStore(database), BlobStore(upload_dir))
        event = service.create_event({'title': 'Tech Talk', ...})
    """

    def __init__(self, store: EventStore, blobs: BlobStore) -> None:
        self._store = store
        self._blobs = blobs

    def list_events(self) -> List[Event]:
        """Return all events sorted by date ascending."""
        return self._store.list_events()

    def search_events(self, query: Optional[str]) -> List[Event]:
        """
        Return events whose title, description or venue match the query.

        Any word of the query may match; results are ordered by descending relevance.

        Raises:
            InvalidArgumentError: If the query is missing or blank
        """
        if query is None or not query.strip():
            raise InvalidArgumentError("Search query is required")
        return self._store.search_events(search_terms(query))

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def create_event(self, fields: Mapping[str, Any], image: Optional[ImageUpload] = None) -> Event:
        """
        Validate and store a new event, with an optional image.

        Steps:
        1. Validate fields (nothing is written on failure).
        2. Validate the image, then store it in the blob store.
        3. Insert the record; if that fails the stored image is deleted again.

        Raises:
            ValidationError: If fields are missing or invalid
            InvalidUploadError: If the image is not an accepted image or is too large
            StorageError: If the record could not be persisted
        """
        values = validate_fields(fields)
        image_path = self._store_image(image) if image else ''
        values['image'] = image_path

        try:
            event = self._store.insert_event(values)
        except StorageError as e:
            logger.error(f"Error creating event: {e}")
            self._discard_image(image_path)
            raise
        except Exception as e:
            logger.error(f"Error creating event: {e}")
            self._discard_image(image_path)
            raise StorageError(f"Failed to create event: {e}") from e

        logger.info(f"Created event {event.id}: {event.title}")
        return event

    def update_event(
        self,
        event_id: str,
        fields: Mapping[str, Any],
        image: Optional[ImageUpload] = None
    ) -> Event:
        """
        Patch an existing event; unspecified fields keep their values.

        A new image replaces the old one: the new file is stored first, the
        record is patched, and only then is the previous file deleted. If the
        patch fails the new file is deleted and the old one is left in place.

        Raises:
            EventNotFoundError: If the event does not exist
            ValidationError: If any supplied field is invalid
            InvalidUploadError: If the image is not an accepted image or is too large
            StorageError: If the record could not be persisted
        """
        existing = self.get_event(event_id)
        values = validate_fields(fields, partial=True)

        new_image_path = ''
        if image:
            new_image_path = self._store_image(image)
            values['image'] = new_image_path

        try:
            event = self._store.update_event(event_id, values)
        except StorageError as e:
            logger.error(f"Error updating event {event_id}: {e}")
            self._discard_image(new_image_path)
            raise
        except Exception as e:
            logger.error(f"Error updating event {event_id}: {e}")
            self._discard_image(new_image_path)
            raise StorageError(f"Failed to update event: {e}") from e

        if event is None:
            # Deleted by another request in the meantime
            self._discard_image(new_image_path)
            raise EventNotFoundError(event_id)

        if new_image_path and existing.image and existing.image != new_image_path:
            self._discard_image(existing.image)

        logger.info(f"Updated event {event_id}: {', '.join(sorted(values))}")
        return event

    def delete_event(self, event_id: str) -> Dict[str, str]:
        """
        Delete an event and its image.

        Image deletion is best effort: a missing or undeletable file is logged
        and does not stop the record from being deleted.

        Raises:
            EventNotFoundError: If the event does not exist
        """
        event = self.get_event(event_id)
        self._discard_image(event.image)

        if not self._store.delete_event(event_id):
            raise EventNotFoundError(event_id)

        logger.info(f"Deleted event {event_id}: {event.title}")
        return {"message": "Event deleted successfully"}

    def clear_events(self) -> int:
        """Delete every event and its image. Returns the number of events removed."""
        count = 0
        for event in self._store.list_events():
            self._discard_image(event.image)
            if self._store.delete_event(event.id):
                count += 1
        logger.info(f"Cleared {count} events")
        return count

    def health_check(self) -> None:
        """Ping the store; raises StorageUnavailableError if it is unreachable."""
        self._store.ping()

    def _store_image(self, image: ImageUpload) -> str:
        try:
            validate_image(image)
        except InvalidUploadError as e:
            logger.warning(f"Rejected upload {image.filename!r}: {e.message}")
            raise
        return self._blobs.save(image.data, image.filename)

    def _discard_image(self, image_path: str) -> None:
        if not image_path:
            return
        try:
            if not self._blobs.delete(image_path):
                logger.warning(f"Image {image_path} was already missing")
        except BlobStoreError as e:
            logger.warning(f"Could not delete image {image_path}: {e.message}")
