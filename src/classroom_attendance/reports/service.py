from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.precedence import counts_as_present, effective_status
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_hhmmss
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..holidays.repository import HolidayRepository
from ..schedules.index import ScheduleIndex
from ..semesters.service import CalendarService
from ..users.repository import UserRepository


@dataclass(frozen=True)
class DashboardData:
    class_code: str
    class_date: date
    holiday: Optional[str]
    stats: dict[str, int]
    roster: list[dict]


class ReportService:
    """Read models over finalized ledger rows (no PDF rendering here)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        holidays: HolidayRepository,
        schedules: ScheduleIndex,
        calendar: CalendarService,
    ):
        self._attendance = attendance
        self._users = users
        self._holidays = holidays
        self._schedules = schedules
        self._calendar = calendar

    def _require_class(self, class_code: str) -> None:
        if not self._schedules.get(class_code):
            raise NotFoundError("Class not found")

    def class_dashboard(
        self,
        class_code: str,
        *,
        class_date: date | None = None,
        now: datetime | None = None,
    ) -> DashboardData:
        self._require_class(class_code)
        class_date = class_date or self._calendar.snapshot(now).today

        holiday = self._holidays.get_for_date(class_date)
        rows = {r.student_id: r for r in self._attendance.list_for_class(class_code=class_code, class_date=class_date)}

        roster: list[dict] = []
        for u in self._users.list_active_roster():
            rec = rows.get(u.user_id)
            status = effective_status(rec.status if rec else None, holiday=holiday is not None)
            roster.append(
                {
                    "user_id": u.user_id,
                    "user_name": u.name,
                    "time_in": format_hhmmss(rec.time_in) if rec and rec.time_in else None,
                    "time_out": format_hhmmss(rec.time_out) if rec and rec.time_out else None,
                    "status": status.value,
                    "reason": rec.reason if rec else None,
                }
            )

        # Recorded first, then latest arrivals, then by name.
        roster.sort(key=lambda r: r["user_name"])
        roster.sort(key=lambda r: r["time_in"] or "", reverse=True)
        roster.sort(key=lambda r: r["status"] == AttendanceStatus.NOT_RECORDED.value)

        stats = Counter(r["status"] for r in roster)
        return DashboardData(
            class_code=class_code,
            class_date=class_date,
            holiday=holiday.name if holiday else None,
            stats=dict(stats),
            roster=roster,
        )

    def class_summary(self, class_code: str) -> list[dict]:
        """Per-student status counts across every recorded session of the class."""
        self._require_class(class_code)

        per_student: dict[str, Counter] = {}
        for r in self._attendance.list_for_class(class_code=class_code):
            per_student.setdefault(r.student_id, Counter())[r.status] += 1

        out: list[dict] = []
        for u in self._users.list_active_roster():
            counts = per_student.get(u.user_id, Counter())
            total = sum(counts.values())
            attended = sum(n for s, n in counts.items() if counts_as_present(s))
            row = {
                "user_id": u.user_id,
                "user_name": u.name,
                "total_sessions": total,
                "attended": attended,
                "attendance_rate": round(attended * 100 / total) if total else 0,
            }
            for status in AttendanceStatus:
                if status is AttendanceStatus.NOT_RECORDED:
                    continue
                row[f"{status.value.lower()}_count"] = counts.get(status, 0)
            out.append(row)
        return out
