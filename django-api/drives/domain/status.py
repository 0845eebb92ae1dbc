"""Event status as a tagged variant.

Fields that only make sense for one status live on that status, so a
postponed drive cannot exist without a resume date and a reason, and a
cancelled drive cannot exist without a reason.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar

from drives.domain.errors import ValidationError


class StatusKind(Enum):
    """Persisted status names."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    POSTPONED = "postponed"
    COMPLETED = "completed"
    NOT_COMPLETED = "not_completed"
    CANCELLED = "cancelled"


def _require_reason(reason: str | None) -> None:
    if reason is None or not reason.strip():
        raise ValidationError("A reason is required for this status", field="status_reason")


@dataclass(frozen=True)
class Upcoming:
    kind: ClassVar[StatusKind] = StatusKind.UPCOMING
    reason: str | None = None


@dataclass(frozen=True)
class Active:
    kind: ClassVar[StatusKind] = StatusKind.ACTIVE
    reason: str | None = None


@dataclass(frozen=True)
class Postponed:
    """Drive put on hold until ``until``; resumes automatically afterwards."""

    kind: ClassVar[StatusKind] = StatusKind.POSTPONED
    until: datetime
    reason: str

    def __post_init__(self) -> None:
        if self.until is None:
            raise ValidationError(
                "postponed_until is required when postponing a drive",
                field="postponed_until",
            )
        _require_reason(self.reason)


@dataclass(frozen=True)
class Cancelled:
    kind: ClassVar[StatusKind] = StatusKind.CANCELLED
    reason: str

    def __post_init__(self) -> None:
        _require_reason(self.reason)


@dataclass(frozen=True)
class Completed:
    kind: ClassVar[StatusKind] = StatusKind.COMPLETED
    reason: str | None = None


@dataclass(frozen=True)
class NotCompleted:
    kind: ClassVar[StatusKind] = StatusKind.NOT_COMPLETED
    reason: str | None = None


EventStatus = Upcoming | Active | Postponed | Cancelled | Completed | NotCompleted

# The automatic engine never moves a drive out of these.
TERMINAL_KINDS = frozenset(
    {StatusKind.COMPLETED, StatusKind.NOT_COMPLETED, StatusKind.CANCELLED}
)
JOINABLE_KINDS = frozenset(
    {StatusKind.UPCOMING, StatusKind.ACTIVE, StatusKind.POSTPONED}
)
# not_completed is only ever decided by the engine.
MANUAL_KINDS = frozenset(
    {
        StatusKind.UPCOMING,
        StatusKind.ACTIVE,
        StatusKind.POSTPONED,
        StatusKind.COMPLETED,
        StatusKind.CANCELLED,
    }
)


def parse_kind(value: str) -> StatusKind:
    try:
        return StatusKind(value)
    except ValueError:
        raise ValidationError(f"Invalid status value: {value!r}", field="status") from None


def build_status(
    kind: StatusKind,
    reason: str | None = None,
    postponed_until: datetime | None = None,
) -> EventStatus:
    """Build the variant for ``kind``, rejecting fields it does not carry."""
    if kind is StatusKind.POSTPONED:
        return Postponed(until=postponed_until, reason=reason)
    if postponed_until is not None:
        raise ValidationError(
            "postponed_until is only allowed for postponed drives",
            field="postponed_until",
        )
    if kind is StatusKind.CANCELLED:
        return Cancelled(reason=reason)
    reason = reason or None
    if kind is StatusKind.UPCOMING:
        return Upcoming(reason=reason)
    if kind is StatusKind.ACTIVE:
        return Active(reason=reason)
    if kind is StatusKind.COMPLETED:
        return Completed(reason=reason)
    return NotCompleted(reason=reason)


def postponed_until(status: EventStatus) -> datetime | None:
    return status.until if isinstance(status, Postponed) else None
