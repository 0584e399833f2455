"""Unit tests for EventService.

These cover validation, error mapping and the image lifecycle: no orphaned
files after a failure and no dangling image references after a change.
Run with: pytest campus_events/tests/test_services.py -v
"""

import pytest

from campus_events.errors import (
    EventNotFoundError,
    InvalidArgumentError,
    InvalidUploadError,
    StorageError,
    ValidationError,
)
from campus_events.models import EventStatus
from campus_events.schemas import ImageUpload


def _png(data: bytes, name: str = "poster.png") -> ImageUpload:
    return ImageUpload(filename=name, content_type="image/png", data=data)


class TestCreateEvent:
    """Tests for create_event."""

    def test_create_then_get_returns_supplied_fields(self, service, event_fields):
        event = service.create_event(event_fields)
        fetched = service.get_event(event.id).to_dict()

        for key, value in event_fields.items():
            assert str(fetched[key]) == value
        assert fetched["currentParticipants"] == 0
        assert fetched["status"] == "upcoming"
        assert fetched["image"] == ""

    def test_long_title_and_venue_round_trip(self, service, event_fields):
        event_fields.update({"title": "T" * 300, "venue": "V" * 300})
        event = service.create_event(event_fields)

        fetched = service.get_event(event.id)

        assert fetched.title == "T" * 300
        assert fetched.venue == "V" * 300

    def test_description_whitespace_round_trips(self, service, event_fields):
        event_fields["description"] = "  Indented intro\n"
        event = service.create_event(event_fields)

        assert service.get_event(event.id).description == "  Indented intro\n"

    def test_max_participants_zero_raises_validation_error(self, service, event_fields):
        event_fields["maxParticipants"] = "0"

        with pytest.raises(ValidationError):
            service.create_event(event_fields)
        assert service.list_events() == []

    def test_max_participants_one_succeeds(self, service, event_fields):
        event_fields["maxParticipants"] = "1"

        assert service.create_event(event_fields).max_participants == 1

    def test_status_can_be_overridden(self, service, event_fields):
        event_fields["status"] = "ongoing"

        assert service.create_event(event_fields).status is EventStatus.ONGOING

    def test_image_is_stored(self, service, blob_store, event_fields, png_bytes):
        event = service.create_event(event_fields, _png(png_bytes))

        assert event.image.startswith("/uploads/")
        assert event.image.endswith(".png")
        assert blob_store.list_files() == [event.image]

    def test_non_image_upload_leaves_no_file(self, service, blob_store, event_fields):
        with pytest.raises(InvalidUploadError):
            service.create_event(event_fields, _png(b"plain text, not a picture", "notes.png"))

        assert blob_store.list_files() == []
        assert service.list_events() == []

    def test_invalid_fields_with_image_leave_no_file(self, service, blob_store, event_fields, png_bytes):
        del event_fields["venue"]

        with pytest.raises(ValidationError) as exc_info:
            service.create_event(event_fields, _png(png_bytes))

        assert exc_info.value.fields == ["venue"]
        assert blob_store.list_files() == []

    def test_storage_failure_removes_written_image(
        self, service, store, blob_store, event_fields, png_bytes, monkeypatch
    ):
        def fail(values):
            raise StorageError("disk full")

        monkeypatch.setattr(store, "insert_event", fail)

        with pytest.raises(StorageError):
            service.create_event(event_fields, _png(png_bytes))

        assert blob_store.list_files() == []

    def test_unexpected_failure_is_reported_as_storage_error(
        self, service, store, blob_store, event_fields, png_bytes, monkeypatch
    ):
        def fail(values):
            raise RuntimeError("driver bug")

        monkeypatch.setattr(store, "insert_event", fail)

        with pytest.raises(StorageError):
            service.create_event(event_fields, _png(png_bytes))

        assert blob_store.list_files() == []


class TestUpdateEvent:
    """Tests for update_event."""

    def test_title_only_update_changes_only_title(self, service, event_fields, png_bytes):
        event = service.create_event(event_fields, _png(png_bytes))

        updated = service.update_event(event.id, {"title": "New"})

        before = event.to_dict()
        after = updated.to_dict()
        assert after["title"] == "New"
        for key in before:
            if key not in ("title", "updatedAt"):
                assert after[key] == before[key], key

    def test_blank_defaulted_fields_are_left_unchanged(self, service, event_fields):
        event = service.create_event({**event_fields, "currentParticipants": "4", "status": "ongoing"})

        updated = service.update_event(
            event.id, {"title": "New", "currentParticipants": "", "status": ""}
        )

        assert updated.title == "New"
        assert updated.current_participants == 4
        assert updated.status is EventStatus.ONGOING

    def test_new_image_replaces_old_file(self, service, blob_store, event_fields, image_factory):
        event = service.create_event(event_fields, _png(image_factory("PNG")))
        old_image = event.image

        updated = service.update_event(
            event.id, {}, ImageUpload("new.gif", "image/gif", image_factory("GIF", color="blue"))
        )

        assert updated.image != old_image
        assert updated.image.endswith(".gif")
        assert not blob_store.exists(old_image)
        assert blob_store.list_files() == [updated.image]

    def test_image_added_to_event_without_one(self, service, blob_store, event_fields, png_bytes):
        event = service.create_event(event_fields)

        updated = service.update_event(event.id, {}, _png(png_bytes))

        assert blob_store.list_files() == [updated.image]

    def test_unknown_event_raises_not_found_and_writes_nothing(self, service, blob_store, png_bytes):
        with pytest.raises(EventNotFoundError):
            service.update_event("missing", {"title": "New"}, _png(png_bytes))

        assert blob_store.list_files() == []

    def test_invalid_fields_keep_old_image(self, service, blob_store, event_fields, image_factory):
        event = service.create_event(event_fields, _png(image_factory("PNG")))

        with pytest.raises(ValidationError):
            service.update_event(
                event.id, {"maxParticipants": "0"}, _png(image_factory("PNG", color="green"))
            )

        assert blob_store.list_files() == [event.image]
        assert service.get_event(event.id).max_participants == 50

    def test_invalid_upload_keeps_old_image(self, service, blob_store, event_fields, png_bytes):
        event = service.create_event(event_fields, _png(png_bytes))

        with pytest.raises(InvalidUploadError):
            service.update_event(event.id, {"title": "New"}, _png(b"nope"))

        assert blob_store.list_files() == [event.image]
        assert service.get_event(event.id).title == "Tech Talk"

    def test_storage_failure_discards_new_image_and_keeps_old(
        self, service, store, blob_store, event_fields, image_factory, monkeypatch
    ):
        event = service.create_event(event_fields, _png(image_factory("PNG")))

        def fail(event_id, values):
            raise StorageError("connection reset")

        monkeypatch.setattr(store, "update_event", fail)

        with pytest.raises(StorageError):
            service.update_event(event.id, {}, _png(image_factory("PNG", color="green")))

        assert blob_store.list_files() == [event.image]

    def test_event_deleted_during_update(
        self, service, store, blob_store, event_fields, png_bytes, monkeypatch
    ):
        event = service.create_event(event_fields)
        monkeypatch.setattr(store, "update_event", lambda event_id, values: None)

        with pytest.raises(EventNotFoundError):
            service.update_event(event.id, {}, _png(png_bytes))

        assert blob_store.list_files() == []


class TestDeleteEvent:
    """Tests for delete_event."""

    def test_delete_removes_record_and_image(self, service, blob_store, event_fields, png_bytes):
        event = service.create_event(event_fields, _png(png_bytes))

        assert service.delete_event(event.id) == {"message": "Event deleted successfully"}

        with pytest.raises(EventNotFoundError):
            service.get_event(event.id)
        assert blob_store.list_files() == []

    def test_missing_image_file_does_not_block_delete(self, service, blob_store, event_fields, png_bytes):
        event = service.create_event(event_fields, _png(png_bytes))
        blob_store.path_for(event.image).unlink()

        service.delete_event(event.id)

        with pytest.raises(EventNotFoundError):
            service.get_event(event.id)

    def test_delete_unknown_raises_not_found(self, service):
        with pytest.raises(EventNotFoundError):
            service.delete_event("missing")

    def test_clear_events(self, service, blob_store, event_fields, png_bytes):
        service.create_event(event_fields, _png(png_bytes))
        service.create_event(event_fields)

        assert service.clear_events() == 2
        assert service.list_events() == []
        assert blob_store.list_files() == []


class TestQueries:
    """Tests for list, get and search."""

    def test_get_unknown_raises_not_found(self, service):
        with pytest.raises(EventNotFoundError) as exc_info:
            service.get_event("missing")

        assert exc_info.value.event_id == "missing"

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_search_requires_query(self, service, query):
        with pytest.raises(InvalidArgumentError):
            service.search_events(query)

    def test_search_sports(self, service, event_fields):
        sports = service.create_event({**event_fields, "title": "Sports Meet", "eventType": "Sports"})
        service.create_event({**event_fields, "title": "Poetry Evening", "eventType": "Cultural"})

        assert [e.id for e in service.search_events("Sports")] == [sports.id]

    def test_search_ignores_query_syntax(self, service, event_fields):
        """Quotes, operators and punctuation are not passed through as query syntax."""
        event = service.create_event(event_fields)

        assert [e.id for e in service.search_events('"tech" OR -(talk*')] == [event.id]
        assert service.search_events("!!!") == []

    def test_list_sorted_by_date(self, service, event_fields):
        service.create_event({**event_fields, "title": "Second", "date": "2030-05-01"})
        service.create_event({**event_fields, "title": "First", "date": "2030-01-01"})

        assert [e.title for e in service.list_events()] == ["First", "Second"]
