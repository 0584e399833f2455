"""Persistence model for events and its text-search index.

The search index covers exactly title, description and venue. It is created
per dialect right after the events table:
- SQLite: an FTS5 table kept in sync by triggers
- PostgreSQL: a GIN index over an english tsvector expression
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, Date, DateTime, DDL, Index, Integer, String, Text, event

from .base import Base
from .event import Event, EventStatus, EventType

SEARCH_TABLE = 'events_search'

# Shared by the PostgreSQL index and the search query so the planner can use the index
POSTGRES_SEARCH_DOCUMENT = (
    "to_tsvector('english', "
    "coalesce(title, '') || ' ' || coalesce(description, '') || ' ' || coalesce(venue, ''))"
)


def new_event_id() -> str:
    """Generate an opaque event identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventRecord(Base):
    """
    Row in the events table.

    Fields mirror the Event model; camelCase wire names are only used at the API edge.
    """
    __tablename__ = 'events'

    id = Column(String(32), primary_key=True, default=new_event_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    event_type = Column(String(32), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Text, nullable=False)
    venue = Column(Text, nullable=False)
    max_participants = Column(Integer, nullable=False)
    current_participants = Column(Integer, nullable=False, default=0)
    image = Column(String(255), nullable=False, default='')
    status = Column(String(16), nullable=False, default=EventStatus.UPCOMING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_events_date', 'date'),
    )

    def to_event(self, score: Any = None) -> Event:
        """Convert to an immutable Event, detached from the session."""
        return Event(
            id=self.id,
            title=self.title,
            description=self.description,
            event_type=EventType(self.event_type),
            date=self.date,
            time=self.time,
            venue=self.venue,
            max_participants=self.max_participants,
            current_participants=self.current_participants,
            image=self.image or '',
            status=EventStatus(self.status),
            created_at=self.created_at,
            updated_at=self.updated_at,
            score=float(score) if score is not None else None,
        )

    def __str__(self) -> str:
        """String representation."""
        return f"EventRecord(id={self.id}, title={self.title}, date={self.date})"


def column_values(values: Dict[str, Any]) -> Dict[str, Any]:
    """Turn enum members into their stored string values."""
    return {
        key: value.value if isinstance(value, (EventType, EventStatus)) else value
        for key, value in values.items()
    }


# SQLite full-text search
_SQLITE_SEARCH_DDL = [
    f"CREATE VIRTUAL TABLE IF NOT EXISTS {SEARCH_TABLE} USING fts5("
    "event_id UNINDEXED, title, description, venue, tokenize = 'porter unicode61')",
    f"CREATE TRIGGER IF NOT EXISTS events_search_insert AFTER INSERT ON events BEGIN "
    f"INSERT INTO {SEARCH_TABLE} (event_id, title, description, venue) "
    "VALUES (new.id, new.title, new.description, new.venue); END",
    f"CREATE TRIGGER IF NOT EXISTS events_search_delete AFTER DELETE ON events BEGIN "
    f"DELETE FROM {SEARCH_TABLE} WHERE event_id = old.id; END",
    f"CREATE TRIGGER IF NOT EXISTS events_search_update "
    "AFTER UPDATE OF title, description, venue ON events BEGIN "
    f"DELETE FROM {SEARCH_TABLE} WHERE event_id = old.id; "
    f"INSERT INTO {SEARCH_TABLE} (event_id, title, description, venue) "
    "VALUES (new.id, new.title, new.description, new.venue); END",
]

for _statement in _SQLITE_SEARCH_DDL:
    event.listen(
        EventRecord.__table__,
        'after_create',
        DDL(_statement).execute_if(dialect='sqlite'),
    )

# PostgreSQL full-text search
event.listen(
    EventRecord.__table__,
    'after_create',
    DDL(
        f"CREATE INDEX IF NOT EXISTS ix_events_search ON events USING GIN ({POSTGRES_SEARCH_DOCUMENT})"
    ).execute_if(dialect='postgresql'),
)

# Dropping the table must take the FTS5 shadow table with it
event.listen(
    EventRecord.__table__,
    'after_drop',
    DDL(f"DROP TABLE IF EXISTS {SEARCH_TABLE}").execute_if(dialect='sqlite'),
)
