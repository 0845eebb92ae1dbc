"""Time source used by the services."""

from datetime import datetime
from typing import Protocol

from django.utils import timezone


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Current instant, timezone-aware (UTC)."""

    def now(self) -> datetime:
        return timezone.now()
