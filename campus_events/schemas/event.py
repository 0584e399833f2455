"""
Pydantic schemas for event requests

Create and update share the same constraints but differ in which fields are
required. Validation happens here, before anything reaches the database.
"""
from dataclasses import dataclass
from datetime import date as CalendarDate
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from ..models.event import EventStatus, EventType


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _parse_date(value: Any) -> Any:
    # Browsers and JSON clients may send a full ISO datetime; keep the calendar date
    if isinstance(value, str) and len(value) > 10 and value[10] in ('T', ' '):
        return value[:10]
    return value


class EventFields(BaseModel):
    """Common configuration: wire names are camelCase aliases, unknown fields are ignored"""
    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
    )


class EventCreate(EventFields):
    """Schema for creating an event"""
    title: str = Field(..., min_length=1, description="Event title")
    description: str = Field(..., min_length=1, description="Event description")
    event_type: EventType = Field(..., alias="eventType", description="Kind of event")
    date: CalendarDate = Field(..., description="Calendar date (YYYY-MM-DD)")
    time: str = Field(..., min_length=1, description="Free-form time of day")
    venue: str = Field(..., min_length=1, description="Where the event takes place")
    max_participants: int = Field(..., ge=1, alias="maxParticipants", description="Capacity")
    current_participants: int = Field(0, ge=0, alias="currentParticipants")
    status: EventStatus = Field(EventStatus.UPCOMING, description="upcoming, ongoing or completed")

    @field_validator('title', mode='before')
    @classmethod
    def strip_title(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        return _parse_date(value)


class EventUpdate(EventFields):
    """Schema for updating an event; unspecified fields keep their values"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    event_type: Optional[EventType] = Field(None, alias="eventType")
    date: Optional[CalendarDate] = Field(None)
    time: Optional[str] = Field(None, min_length=1)
    venue: Optional[str] = Field(None, min_length=1)
    max_participants: Optional[int] = Field(None, ge=1, alias="maxParticipants")
    current_participants: Optional[int] = Field(None, ge=0, alias="currentParticipants")
    status: Optional[EventStatus] = Field(None)

    @field_validator('title', mode='before')
    @classmethod
    def strip_title(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        return _parse_date(value)


# Fields with a default; an empty form value means "use the default" on create
# and "leave unchanged" on update
_BLANK_MEANS_UNSET = ('currentParticipants', 'current_participants', 'status')

# Never accepted from request fields
_READ_ONLY = ('id', '_id', 'image', 'createdAt', 'updatedAt', 'created_at', 'updated_at')


def validate_fields(raw: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Parse raw request fields into validated column values

    Args:
        raw: Field map from a form or JSON body (camelCase or snake_case keys)
        partial: True for updates, where every field is optional

    Returns:
        Dict of snake_case field names to validated values. For updates it only
        contains the fields that were supplied.

    Raises:
        ValidationError: Listing every offending field
    """
    data = {key: value for key, value in raw.items() if key not in _READ_ONLY}
    schema: Type[EventFields] = EventUpdate if partial else EventCreate

    for key in _BLANK_MEANS_UNSET:
        if data.get(key) == '':
            data.pop(key)

    try:
        parsed = schema.model_validate(data)
    except PydanticValidationError as e:
        fields = []
        details = []
        for error in e.errors():
            field = str(error['loc'][0]) if error['loc'] else 'body'
            if field not in fields:
                fields.append(field)
            details.append(f"{field}: {error['msg']}")
        raise ValidationError(fields=fields, details=details) from e

    values = parsed.model_dump(exclude_unset=partial)

    if partial:
        # Explicit nulls would clear required columns
        nulls = [
            EventUpdate.model_fields[name].alias or name
            for name, value in values.items() if value is None
        ]
        if nulls:
            raise ValidationError(
                fields=nulls,
                details=[f"{field}: must not be null" for field in nulls],
            )

    return values


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image as received from the client"""
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)
