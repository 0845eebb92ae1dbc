from drives.domain.models import (
    Category,
    City,
    CompletionSummary,
    Event,
    ParticipantRecord,
    Testimonial,
    UserDrives,
)
from drives.domain.status import (
    Active,
    Cancelled,
    Completed,
    EventStatus,
    NotCompleted,
    Postponed,
    StatusKind,
    Upcoming,
)
from drives.domain.value_objects import CategoryId, CityId, EventId, GeoPoint, UserId

__all__ = [
    "Event",
    "City",
    "Category",
    "ParticipantRecord",
    "Testimonial",
    "CompletionSummary",
    "UserDrives",
    "EventStatus",
    "StatusKind",
    "Upcoming",
    "Active",
    "Postponed",
    "Cancelled",
    "Completed",
    "NotCompleted",
    "EventId",
    "CityId",
    "CategoryId",
    "UserId",
    "GeoPoint",
]
