"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    SPEAKER_NOT_FOUND = "SPEAKER_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_SPEAKER_ID = "INVALID_SPEAKER_ID"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    INVALID_INPUT = "INVALID_INPUT"
    STORAGE_ERROR = "STORAGE_ERROR"
    CONFLICT = "CONFLICT"
    PARTIAL_CONSISTENCY = "PARTIAL_CONSISTENCY"
    OPERATION_CANCELLED = "OPERATION_CANCELLED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class SpeakerNotFoundError(DomainError):
    """Raised when a speaker is not found.

    ``completed_steps`` lists link sides already committed before the lookup
    failed, so the caller knows a retry with a valid id is needed.
    """

    def __init__(self, speaker_id: str, completed_steps: tuple = ()) -> None:
        super().__init__(
            code=ErrorCode.SPEAKER_NOT_FOUND,
            message="Speaker not found",
        )
        self.speaker_id = speaker_id
        self.completed_steps = tuple(completed_steps)


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidSpeakerIdError(DomainError):
    """Raised when a speaker ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SPEAKER_ID,
            message="Invalid speaker ID format",
        )


class InvalidDateFormatError(DomainError):
    """Raised when a date or time string cannot be parsed."""

    def __init__(self, value: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATE_FORMAT,
            message="Dates must use DD/MM/YYYY and times HH:MM AM/PM",
        )
        self.value = value


class InvalidInputError(DomainError):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)
        self.field = field


class StorageError(DomainError):
    """Raised when the persistence layer fails or is unavailable."""

    def __init__(self, message: str = "Storage is unavailable") -> None:
        super().__init__(code=ErrorCode.STORAGE_ERROR, message=message)


class ConflictError(DomainError):
    """Raised when a save collides with an existing document."""

    def __init__(self, message: str = "Document already exists") -> None:
        super().__init__(code=ErrorCode.CONFLICT, message=message)


class PartialLinkError(DomainError):
    """Raised when a link operation stopped after committing some sides."""

    def __init__(self, completed_steps: tuple, message: str = "Link only partially applied") -> None:
        super().__init__(code=ErrorCode.PARTIAL_CONSISTENCY, message=message)
        self.completed_steps = tuple(completed_steps)


class OperationCancelledError(DomainError):
    """Raised when a caller's deadline expired between storage calls."""

    def __init__(self, completed_steps: tuple) -> None:
        super().__init__(
            code=ErrorCode.OPERATION_CANCELLED,
            message="Deadline expired before the operation completed",
        )
        self.completed_steps = tuple(completed_steps)
