from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import minutes_between
from ...core.enums import AttendanceStatus
from .base import CheckinStrategy, StatusDecision


class LateStrategy(CheckinStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: datetime, class_start: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, minutes_from_start=minutes_between(class_start, now))
