"""Models package initialization."""

from .base import Base
from .event import Event, EventStatus, EventType
from .event_record import EventRecord

__all__ = ['Base', 'Event', 'EventRecord', 'EventStatus', 'EventType']
