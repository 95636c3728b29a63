from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from ..attendance.overrides import OverrideService
from ..common.datetime_utils import at
from ..common.log import get_logger
from ..core.constants import SWEEP_GRACE_MINUTES
from ..core.enums import AttendanceStatus
from ..holidays.repository import HolidayRepository
from ..schedules.index import ScheduleIndex
from ..semesters.service import CalendarService

logger = get_logger("sweep")


@dataclass
class SweepReport:
    run_at: datetime
    class_date: date
    holiday: Optional[str] = None
    classes_processed: list[str] = field(default_factory=list)
    holiday_inserted: int = 0
    absent_inserted: int = 0
    incomplete_marked: int = 0

    @property
    def changes(self) -> int:
        return self.holiday_inserted + self.absent_inserted + self.incomplete_marked

    def as_dict(self) -> dict:
        return {
            "run_at": self.run_at.isoformat(timespec="seconds"),
            "class_date": self.class_date.isoformat(),
            "holiday": self.holiday,
            "classes_processed": list(self.classes_processed),
            "holiday_inserted": self.holiday_inserted,
            "absent_inserted": self.absent_inserted,
            "incomplete_marked": self.incomplete_marked,
        }


class ReconciliationSweep:
    """Finalizes today's no-shows and forgotten check-outs.

    Writes are insert-if-absent or guarded on PRESENT/LATE without
    time_out, so a tick commutes with concurrent check-ins/outs and a
    re-run over unchanged state changes nothing.
    """

    def __init__(
        self,
        calendar: CalendarService,
        schedules: ScheduleIndex,
        holidays: HolidayRepository,
        overrides: OverrideService,
        *,
        grace_minutes: int = SWEEP_GRACE_MINUTES,
    ):
        self._calendar = calendar
        self._schedules = schedules
        self._holidays = holidays
        self._overrides = overrides
        self._grace = timedelta(minutes=int(grace_minutes))

    def run(self, now: datetime | None = None) -> SweepReport:
        snap = self._calendar.snapshot(now)
        today = snap.today
        report = SweepReport(run_at=snap.now, class_date=today)

        if snap.semester is None:
            logger.info("sweep %s: no active semester, nothing to do", today.isoformat())
            return report

        holiday = self._holidays.get_for_date(today)
        report.holiday = holiday.name if holiday else None

        for entry in self._schedules.classes_for(today, snap.semester):
            if holiday:
                # Make-ups booked onto a holiday keep their PENDING rows.
                if not self._schedules.is_nominal(entry, today, snap.semester):
                    continue
                report.holiday_inserted += self._overrides.fill_missing(
                    class_date=today, class_code=entry.class_code, status=AttendanceStatus.HOLIDAY
                )
                report.classes_processed.append(entry.class_code)
                continue

            if snap.now <= at(today, entry.end_time) + self._grace:
                continue

            report.absent_inserted += self._overrides.fill_missing(
                class_date=today, class_code=entry.class_code, status=AttendanceStatus.ABSENT
            )
            report.incomplete_marked += self._overrides.finalize_incomplete(class_date=today, class_code=entry.class_code)
            report.classes_processed.append(entry.class_code)

        logger.info(
            "sweep %s: %d classes, %d holiday, %d absent, %d incomplete",
            today.isoformat(),
            len(report.classes_processed),
            report.holiday_inserted,
            report.absent_inserted,
            report.incomplete_marked,
        )
        return report
