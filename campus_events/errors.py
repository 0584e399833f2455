"""Error taxonomy for the events API.

Every error carries a machine-readable code and a user-safe message.
The HTTP layer maps these to status codes; services never raise HTTPException.
"""

from enum import Enum
from typing import List, Optional


class ErrorCode(Enum):
    """Error codes surfaced in API responses."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_UPLOAD = "INVALID_UPLOAD"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    STORAGE_ERROR = "STORAGE_ERROR"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    BLOB_STORE_ERROR = "BLOB_STORE_ERROR"


class EventServiceError(Exception):
    """Base error with code and user-safe message."""

    code = ErrorCode.STORAGE_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code.value}


class ValidationError(EventServiceError):
    """Raised when event fields are missing, malformed or out of range."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, fields: List[str], details: Optional[List[str]] = None) -> None:
        self.fields = list(fields)
        self.details = list(details or [])
        super().__init__(f"Invalid event fields: {', '.join(self.fields)}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = self.fields
        if self.details:
            data["details"] = self.details
        return data


class InvalidArgumentError(EventServiceError):
    """Raised for malformed query parameters."""

    code = ErrorCode.INVALID_ARGUMENT


class InvalidUploadError(EventServiceError):
    """Raised when an uploaded file is not an accepted image or is too large."""

    code = ErrorCode.INVALID_UPLOAD


class EventNotFoundError(EventServiceError):
    """Raised when an event is not found."""

    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class StorageError(EventServiceError):
    """Raised when the storage engine fails an operation."""

    code = ErrorCode.STORAGE_ERROR


class StorageUnavailableError(StorageError):
    """Raised when the storage engine cannot be reached."""

    code = ErrorCode.STORAGE_UNAVAILABLE


class BlobStoreError(EventServiceError):
    """Raised when a file operation in the upload directory fails."""

    code = ErrorCode.BLOB_STORE_ERROR
