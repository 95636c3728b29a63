from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import (
    DEFAULT_ABSENT_WINDOW_MINUTES,
    DEFAULT_CHECKIN_WINDOW_MINUTES,
    DEFAULT_CHECKOUT_WINDOW_MINUTES,
    DEFAULT_LATE_WINDOW_MINUTES,
)


@dataclass(frozen=True)
class SemesterConfig:
    """The active enrollment period. Derived from configuration, never persisted."""

    semester_id: str
    start: date
    end: date
    adjustment_end: date
    label: str
    academic_year: str

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def adjustment_open(self, day: date) -> bool:
        return day <= self.adjustment_end


@dataclass(frozen=True)
class AttendanceWindows:
    """Window sizes in minutes, relative to a session's scheduled start (or end for checkout)."""

    checkin_minutes: int = DEFAULT_CHECKIN_WINDOW_MINUTES
    late_minutes: int = DEFAULT_LATE_WINDOW_MINUTES
    absent_minutes: int = DEFAULT_ABSENT_WINDOW_MINUTES
    checkout_minutes: int = DEFAULT_CHECKOUT_WINDOW_MINUTES


@dataclass(frozen=True)
class CalendarSnapshot:
    """One consistent view of "now" for a single logical operation."""

    now: datetime
    semester: Optional[SemesterConfig]
    windows: AttendanceWindows

    @property
    def today(self) -> date:
        return self.now.date()
