from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import iter_dates, weekday_code
from ..semesters.model import SemesterConfig
from .model import ScheduleEntry
from .repository import ScheduleRepository


class ScheduleIndex:
    """Resolves which class sessions meet on a given date.

    Nominal meetings (weekday, semester, cycle window) are unioned with any
    class holding a make-up row for that exact date (still PENDING, or
    already checked into), so every caller (student listing and sweep
    alike) sees the same set.
    """

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def get(self, class_code: str) -> Optional[ScheduleEntry]:
        return self._schedules.get(class_code)

    def classes_taught_by(self, professor_id: str) -> Sequence[ScheduleEntry]:
        return self._schedules.list_for_professor(professor_id)

    @staticmethod
    def offered_in(entry: ScheduleEntry, semester: SemesterConfig) -> bool:
        return entry.semester == semester.semester_id and entry.academic_year == semester.academic_year

    @classmethod
    def is_nominal(cls, entry: ScheduleEntry, day: date, semester: SemesterConfig) -> bool:
        return cls.offered_in(entry, semester) and entry.meets_on(day)

    def occurrences(
        self,
        entry: ScheduleEntry,
        semester: SemesterConfig,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[date]:
        """Nominal meeting dates of ``entry`` within the semester (optionally narrowed)."""
        first = max(start or semester.start, semester.start)
        last = min(end or semester.end, semester.end)
        return [d for d in iter_dates(first, last) if self.is_nominal(entry, d, semester)]

    def nominal_classes_for(self, day: date, semester: SemesterConfig, *, weekday: Optional[str] = None) -> list[ScheduleEntry]:
        weekday = weekday or weekday_code(day)
        return [
            e
            for e in self._schedules.list_for_weekday(weekday)
            if weekday in e.days and self.offered_in(e, semester) and e.in_cycle(day)
        ]

    def classes_for(self, day: date, semester: SemesterConfig, *, weekday: Optional[str] = None) -> list[ScheduleEntry]:
        out = self.nominal_classes_for(day, semester, weekday=weekday)
        seen = {e.class_code for e in out}
        for e in self._schedules.list_with_makeup_on(day):
            if e.class_code not in seen:
                out.append(e)
                seen.add(e.class_code)
        out.sort(key=lambda e: (e.start_time, e.class_code))
        return out
