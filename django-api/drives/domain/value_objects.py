"""Domain primitives that enforce validity at creation time."""

import math
from dataclasses import dataclass
from typing import Self
from uuid import UUID

# A drive is discoverable once it has gathered a third of its expected
# volunteers, and never with fewer than ten.
QUORUM_DIVISOR = 3
QUORUM_FLOOR = 10


def min_participants(expected_participants: int) -> int:
    """Return the quorum a drive needs before it is publicly listed."""
    return max(math.ceil(expected_participants / QUORUM_DIVISOR), QUORUM_FLOOR)


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CityId:
    """Unique identifier for a City."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CategoryId:
    """Unique identifier for a Category."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId:
    """Opaque user identifier issued by the identity provider."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("UserId cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GeoPoint:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90 <= self.latitude <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        if not -180 <= self.longitude <= 180:
            raise ValueError("Longitude must be between -180 and 180")
