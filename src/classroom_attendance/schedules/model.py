from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import FrozenSet, Optional

from ..common.datetime_utils import weekday_code


@dataclass(frozen=True)
class ScheduleEntry:
    """A class session pattern keyed by class code."""

    class_code: str
    class_name: str
    days: FrozenSet[str]
    start_time: time
    end_time: time
    semester: str
    academic_year: str
    professor_id: Optional[str] = None
    cycle_start: Optional[date] = None
    cycle_end: Optional[date] = None

    def in_cycle(self, day: date) -> bool:
        if self.cycle_start and day < self.cycle_start:
            return False
        if self.cycle_end and day > self.cycle_end:
            return False
        return True

    def meets_on(self, day: date) -> bool:
        """Nominal meeting: weekday in the day set and inside the cycle window, if any."""
        return weekday_code(day) in self.days and self.in_cycle(day)
