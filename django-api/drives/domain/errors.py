"""Domain error codes for the drives module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    NOT_JOINED = "NOT_JOINED"
    INVALID_ID = "INVALID_ID"
    FORBIDDEN = "FORBIDDEN"
    IMMUTABLE = "IMMUTABLE"
    ALREADY_JOINED = "ALREADY_JOINED"
    EVENT_NOT_JOINABLE = "EVENT_NOT_JOINABLE"
    EVENT_FULL = "EVENT_FULL"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"
    FEEDBACK_ALREADY_SUBMITTED = "FEEDBACK_ALREADY_SUBMITTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """A referenced entity does not exist."""


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Drive not found")
        self.event_id = event_id


class NotJoinedError(NotFoundError):
    """Raised when leaving a drive the user never joined."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_JOINED,
            message="You have not joined this drive",
        )
        self.event_id = event_id
        self.user_id = user_id


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, field: str = "id") -> None:
        super().__init__(code=ErrorCode.INVALID_ID, message="Invalid identifier format")
        self.field = field


class ForbiddenError(DomainError):
    """Raised when the actor may not perform a mutation."""

    def __init__(self, message: str = "Only the drive creator can do this") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class ImmutableEventError(DomainError):
    """Raised when editing a drive that has already completed."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.IMMUTABLE,
            message="Completed drives can no longer be edited",
        )
        self.event_id = event_id


class ConflictError(DomainError):
    """The operation conflicts with the current state."""


class AlreadyJoinedError(ConflictError):
    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_JOINED,
            message="You have already joined this drive",
        )
        self.event_id = event_id
        self.user_id = user_id


class EventNotJoinableError(ConflictError):
    """Raised when the drive's status no longer accepts participant changes."""

    def __init__(self, event_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_JOINABLE,
            message=f"This drive is {status.replace('_', ' ')} and no longer accepts participants",
        )
        self.event_id = event_id
        self.status = status


class ConcurrentUpdateError(ConflictError):
    """Raised when the stored drive changed since it was read."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENT_UPDATE,
            message="The drive was modified concurrently, please retry",
        )
        self.event_id = event_id


class FeedbackAlreadySubmittedError(ConflictError):
    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.FEEDBACK_ALREADY_SUBMITTED,
            message="Feedback was already submitted for this drive",
        )
        self.event_id = event_id
        self.user_id = user_id


class CapacityExceededError(DomainError):
    """Raised when joining a drive that has no free slots."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_FULL, message="This drive is full")
        self.event_id = event_id


class ValidationError(DomainError):
    """Raised when input is missing or invalid; names the offending field."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)
        self.field = field


class TransientStorageError(DomainError):
    """Raised when the underlying store is unavailable or timed out."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Storage is temporarily unavailable",
        )
