"""Pytest configuration and shared fixtures."""

import io
from typing import Dict

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from campus_events.api.app import create_application
from campus_events.db import Database, DatabaseConfig, EventStore
from campus_events.services import EventService
from campus_events.storage import BlobStore


def make_image(image_format: str = "PNG", color: str = "red") -> bytes:
    """Return the bytes of a tiny real image in the given Pillow format."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def database():
    db = Database(DatabaseConfig(url="sqlite://"))
    db.ensure_tables_exist()
    yield db
    db.dispose()


@pytest.fixture
def store(database) -> EventStore:
    return EventStore(database)


@pytest.fixture
def blob_store(tmp_path) -> BlobStore:
    return BlobStore(tmp_path / "uploads")


@pytest.fixture
def service(store, blob_store) -> EventService:
    return EventService(store, blob_store)


@pytest.fixture
def client(blob_store):
    app = create_application(Database(DatabaseConfig(url="sqlite://")), blob_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def event_fields() -> Dict[str, str]:
    """A valid event as a browser form would submit it."""
    return {
        "title": "Tech Talk",
        "description": "Lightning talks by final-year students",
        "eventType": "Technical",
        "date": "2030-03-14",
        "time": "18:00",
        "venue": "Main Auditorium",
        "maxParticipants": "50",
    }


@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG")


@pytest.fixture
def image_factory():
    """Build image bytes on demand: image_factory("GIF", color="blue")."""
    return make_image
