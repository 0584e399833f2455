"""Database package initialization.

This module exposes the public interface of the database package.
"""

from .db_core import Database, DatabaseConfig
from .event_store import EventStore

__all__ = [
    # Core database classes
    'Database',
    'DatabaseConfig',

    # Event persistence
    'EventStore',
]
