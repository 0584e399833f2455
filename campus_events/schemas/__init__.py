"""Request schemas."""

from .event import EventCreate, EventUpdate, ImageUpload, validate_fields

__all__ = ['EventCreate', 'EventUpdate', 'ImageUpload', 'validate_fields']
