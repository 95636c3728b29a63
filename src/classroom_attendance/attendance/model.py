from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Ledger row keyed by (class_date, class_code, student_id).

    ``synthetic`` marks rows written by an override (holiday, suspension,
    credit, make-up, sweep no-show ...) rather than a real attendance
    event; such rows carry no time_in. ``makeup`` marks rows belonging to
    an authorized make-up session and survives the check-in that
    supersedes the PENDING row.
    """

    class_date: date
    class_code: str
    student_id: str
    status: AttendanceStatus
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    synthetic: bool = False
    reason: Optional[str] = None
    makeup: bool = False

    @property
    def key(self) -> tuple[date, str, str]:
        return (self.class_date, self.class_code, self.student_id)

    @classmethod
    def synthetic_row(
        cls,
        *,
        class_date: date,
        class_code: str,
        student_id: str,
        status: AttendanceStatus,
        reason: Optional[str] = None,
        makeup: bool = False,
    ) -> "AttendanceRecord":
        return cls(
            class_date=class_date,
            class_code=class_code,
            student_id=student_id,
            status=status,
            time_in=None,
            synthetic=True,
            reason=reason,
            makeup=makeup,
        )


@dataclass(frozen=True)
class CheckinResult:
    status: AttendanceStatus
    timestamp: Optional[time]
    already_recorded: bool = False


@dataclass(frozen=True)
class CheckoutResult:
    status: AttendanceStatus
    time_out: time
    already_recorded: bool = False
