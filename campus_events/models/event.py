"""Event model definition."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional


class EventType(str, Enum):
    """Kinds of college events."""

    ACADEMIC = "Academic"
    CULTURAL = "Cultural"
    SPORTS = "Sports"
    TECHNICAL = "Technical"
    OTHER = "Other"


class EventStatus(str, Enum):
    """Event status. Only changed by an explicit update."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Event:
    """
    A scheduled college activity, as returned by the event store.

    Fields:
        id: Opaque identifier assigned by the storage layer
        title: Event title
        description: Event description
        event_type: One of EventType
        date: Calendar date of the event
        time: Free-form time of day (e.g. '10:00 AM')
        venue: Where the event takes place
        max_participants: Capacity, at least 1
        current_participants: Participants so far, defaults to 0
        image: URL path of the stored image, or '' if none
        status: One of EventStatus
        created_at: When the record was inserted
        updated_at: When the record was last modified
        score: Text-search relevance, only set on search results
    """
    id: str
    title: str
    description: str
    event_type: EventType
    date: date
    time: str
    venue: str
    max_participants: int
    current_participants: int
    image: str
    status: EventStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape used by the API."""
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'eventType': self.event_type.value,
            'date': self.date.isoformat(),
            'time': self.time,
            'venue': self.venue,
            'maxParticipants': self.max_participants,
            'currentParticipants': self.current_participants,
            'image': self.image,
            'status': self.status.value,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
        if self.score is not None:
            data['score'] = self.score
        return data
