from __future__ import annotations

from datetime import datetime

from ..common.datetime_utils import format_hhmm
from ..core.constants import WEEKDAY_CODES
from ..semesters.service import CalendarService
from ..users.repository import UserRepository
from .index import ScheduleIndex


class ScheduleService:
    def __init__(self, index: ScheduleIndex, users: UserRepository, calendar: CalendarService):
        self._index = index
        self._users = users
        self._calendar = calendar

    def today_schedule(self, *, now: datetime | None = None) -> list[dict]:
        """Sessions meeting today, make-ups included. Empty outside any semester."""
        snap = self._calendar.snapshot(now)
        if snap.semester is None:
            return []

        out: list[dict] = []
        for e in self._index.classes_for(snap.today, snap.semester):
            professor = self._users.get_by_id(e.professor_id) if e.professor_id else None
            out.append(
                {
                    "class_code": e.class_code,
                    "class_name": e.class_name,
                    "days": [d for d in WEEKDAY_CODES if d in e.days],
                    "start_time": format_hhmm(e.start_time),
                    "end_time": format_hhmm(e.end_time),
                    "professor_id": e.professor_id,
                    "professor_name": professor.name if professor else None,
                    "makeup": not self._index.is_nominal(e, snap.today, snap.semester),
                }
            )
        return out
