"""Business logic services."""

from .event_service import EventService
from .image_validation import validate_image

__all__ = ['EventService', 'validate_image']
