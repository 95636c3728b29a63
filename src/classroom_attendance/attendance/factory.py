from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import minutes_between
from ..core.exceptions import WindowClosedError
from ..semesters.model import AttendanceWindows
from .strategies.base import CheckinStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy

CHECKIN_NOT_OPEN = "Check-in not open yet"
CHECKIN_CLOSED = "Check-in closed (Absent)"


@dataclass
class CheckinStrategyFactory:
    """Factory Pattern: choose the check-in strategy, or refuse outside the window.

    Legal interval is [start - checkin, start + absent]; LATE once past start + late.
    """

    def for_checkin(self, *, now: datetime, class_start: datetime, windows: AttendanceWindows) -> CheckinStrategy:
        delta = minutes_between(class_start, now)

        if delta < -windows.checkin_minutes:
            raise WindowClosedError(CHECKIN_NOT_OPEN)
        if delta > windows.absent_minutes:
            raise WindowClosedError(CHECKIN_CLOSED)

        if delta > windows.late_minutes:
            return LateStrategy()
        return OnTimeStrategy()
