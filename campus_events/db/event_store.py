"""Event persistence operations.

DB access only: no validation or blob handling here. Every method opens its own
transaction and returns immutable Event objects.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, literal_column, select, text, update

from .db_core import Database
from ..errors import StorageError
from ..models import Event, EventRecord
from ..models.event_record import POSTGRES_SEARCH_DOCUMENT, SEARCH_TABLE, column_values, utcnow

logger = logging.getLogger(__name__)


def fts_match(terms: List[str]) -> str:
    """FTS5 MATCH expression: each term a quoted string, any term may match."""
    return ' OR '.join(f'"{term}"' for term in terms)


def tsquery_text(terms: List[str]) -> str:
    """to_tsquery input: each term a quoted lexeme, any term may match."""
    return ' | '.join(f"'{term}'" for term in terms)


class EventStore:
    """Storage operations for events backed by a Database handle."""

    def __init__(self, database: Database):
        self.database = database

    def list_events(self) -> List[Event]:
        """Return all events ordered by date ascending."""
        with self.database.session() as session:
            records = session.scalars(
                select(EventRecord).order_by(EventRecord.date, EventRecord.created_at)
            ).all()
            return [record.to_event() for record in records]

    def search_events(self, terms: List[str]) -> List[Event]:
        """
        Full-text search over title, description and venue.

        An event matches when any of the terms matches. Results are ordered by
        descending relevance and carry the relevance in Event.score.

        Args:
            terms: Word tokens; callers strip query syntax before calling

        Raises:
            StorageError: If the dialect has no supported text search
        """
        if not terms:
            return []

        dialect = self.database.dialect
        if dialect == 'sqlite':
            return self._search_sqlite(terms)
        if dialect == 'postgresql':
            return self._search_postgres(terms)
        raise StorageError(f"Text search is not supported on '{dialect}'")

    def _search_sqlite(self, terms: List[str]) -> List[Event]:
        with self.database.session() as session:
            # bm25() is lower for better matches
            rows = session.execute(
                text(
                    f"SELECT event_id, bm25({SEARCH_TABLE}) AS relevance FROM {SEARCH_TABLE} "
                    f"WHERE {SEARCH_TABLE} MATCH :match ORDER BY relevance"
                ),
                {'match': fts_match(terms)},
            ).all()
            if not rows:
                return []

            scores = {row.event_id: -row.relevance for row in rows}
            records = session.scalars(
                select(EventRecord).where(EventRecord.id.in_(list(scores)))
            ).all()
            by_id = {record.id: record for record in records}
            return [
                by_id[event_id].to_event(score=scores[event_id])
                for event_id, _ in sorted(scores.items(), key=lambda item: item[1], reverse=True)
                if event_id in by_id
            ]

    def _search_postgres(self, terms: List[str]) -> List[Event]:
        document = literal_column(POSTGRES_SEARCH_DOCUMENT)
        query = func.to_tsquery('english', tsquery_text(terms))
        score = func.ts_rank(document, query).label('score')
        with self.database.session() as session:
            rows = session.execute(
                select(EventRecord, score)
                .where(document.op('@@')(query))
                .order_by(score.desc())
            ).all()
            return [record.to_event(score=rank) for record, rank in rows]

    def get_event(self, event_id: str) -> Optional[Event]:
        """Return an event by ID, or None if not found."""
        with self.database.session() as session:
            record = session.get(EventRecord, event_id)
            return record.to_event() if record else None

    def insert_event(self, values: Dict[str, Any]) -> Event:
        """Insert a new event. The storage layer assigns id and timestamps."""
        with self.database.session() as session:
            record = EventRecord(**column_values(values))
            session.add(record)
            session.flush()
            session.refresh(record)
            logger.debug(f"Inserted event {record.id}")
            return record.to_event()

    def update_event(self, event_id: str, values: Dict[str, Any]) -> Optional[Event]:
        """
        Apply a field-level patch with a single UPDATE statement.

        Only the given columns (plus updated_at) are written, so concurrent
        updates to other fields are not overwritten.

        Returns:
            The updated event, or None if no event has this ID
        """
        with self.database.session() as session:
            statement = (
                update(EventRecord)
                .where(EventRecord.id == event_id)
                .values(**column_values(values), updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            result = session.execute(statement)
            if result.rowcount == 0:
                return None
            record = session.get(EventRecord, event_id, populate_existing=True)
            return record.to_event() if record else None

    def delete_event(self, event_id: str) -> bool:
        """Delete an event record. Returns False if it did not exist."""
        with self.database.session() as session:
            result = session.execute(
                delete(EventRecord)
                .where(EventRecord.id == event_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

    def ping(self) -> None:
        self.database.ping()
