from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import ConfigError
from .model import CalendarSnapshot, SemesterConfig
from .repository import ConfigRepository
from .resolver import load_windows, resolve_semester

NO_ACTIVE_SEMESTER = "No active semester found for today's date."


class CalendarService:
    """Captures "now" once and resolves semester + windows against it."""

    def __init__(self, config: ConfigRepository, *, clock: Callable[[], datetime] = now_local):
        self._config = config
        self._clock = clock

    def snapshot(self, now: Optional[datetime] = None) -> CalendarSnapshot:
        now = now or self._clock()
        values = self._config.get_all()
        return CalendarSnapshot(now=now, semester=resolve_semester(now, values), windows=load_windows(values))

    @staticmethod
    def require_semester(snapshot: CalendarSnapshot) -> SemesterConfig:
        if snapshot.semester is None:
            raise ConfigError(NO_ACTIVE_SEMESTER)
        return snapshot.semester

    def describe(self, now: Optional[datetime] = None) -> dict:
        snap = self.snapshot(now)
        sem = snap.semester
        return {
            "checkin_window_minutes": snap.windows.checkin_minutes,
            "late_window_minutes": snap.windows.late_minutes,
            "absent_window_minutes": snap.windows.absent_minutes,
            "checkout_window_minutes": snap.windows.checkout_minutes,
            "adjustment_end": sem.adjustment_end.isoformat() if sem else None,
            "current_sem": sem.semester_id if sem else None,
            "semester_label": sem.label if sem else None,
            "academic_year": sem.academic_year if sem else None,
        }
