#!/usr/bin/env python3
"""Delete every event and its uploaded image."""

import logging
import sys
from pathlib import Path

# Make the project importable when run from a checkout
sys.path.append(str(Path(__file__).parent.parent))

from campus_events.config.environment import UPLOAD_DIR
from campus_events.db import Database, DatabaseConfig, EventStore
from campus_events.services import EventService
from campus_events.storage import BlobStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def clear_all_events():
    """Clear all events from the database"""
    database = Database(DatabaseConfig())
    try:
        database.ensure_tables_exist()
        service = EventService(EventStore(database), BlobStore(UPLOAD_DIR))
        count = service.clear_events()
        logger.info(f"Cleared {count} events from database")
    finally:
        database.dispose()

if __name__ == "__main__":
    clear_all_events()
