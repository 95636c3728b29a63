from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import at
from ..common.log import get_logger
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_EXCUSE_REASON_LENGTH
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, StateError
from ..schedules.index import ScheduleIndex
from ..semesters.service import CalendarService
from .factory import CheckinStrategyFactory
from .model import AttendanceRecord, CheckinResult, CheckoutResult
from .precedence import PROVISIONAL
from .repository import AttendanceRepository

logger = get_logger("attendance")

MUST_CHECK_IN_FIRST = "You must check in before checking out."
CANNOT_CHECK_OUT_EXCUSED = "Cannot check out while excused."
INVALID_REASON = f"Please provide a valid reason (min {MIN_EXCUSE_REASON_LENGTH} characters)."
EXCUSE_ALREADY_FILED = "An attendance record already exists for this session."


class AttendanceService:
    """Per-student ledger transitions: check-in, check-out, excuse filing."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleIndex,
        calendar: CalendarService,
        *,
        strategy_factory: CheckinStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._calendar = calendar
        self._factory = strategy_factory or CheckinStrategyFactory()

    def _require_class(self, class_code: str):
        entry = self._schedules.get(class_code)
        if not entry:
            raise NotFoundError("Class not found")
        return entry

    def check_in(self, class_code: str, student_id: str, *, now: datetime | None = None) -> CheckinResult:
        class_code = require_non_empty(class_code, "class_code")
        student_id = require_non_empty(student_id, "student_id")

        snap = self._calendar.snapshot(now)
        self._calendar.require_semester(snap)
        today = snap.today

        existing = self._attendance.get(today, class_code, student_id)
        if existing and existing.status is not AttendanceStatus.PENDING:
            return CheckinResult(status=existing.status, timestamp=existing.time_in, already_recorded=True)

        entry = self._require_class(class_code)
        strategy = self._factory.for_checkin(now=snap.now, class_start=at(today, entry.start_time), windows=snap.windows)
        decision = strategy.decide_checkin(now=snap.now, class_start=at(today, entry.start_time))

        stamp = snap.now.time().replace(microsecond=0)
        record = AttendanceRecord(
            class_date=today,
            class_code=class_code,
            student_id=student_id,
            status=decision.status,
            time_in=stamp,
            makeup=bool(existing and existing.makeup),
        )

        if existing:
            # A real check-in supersedes the make-up pre-authorization.
            written = self._attendance.replace_if_status(record, expected=AttendanceStatus.PENDING)
        else:
            written = self._attendance.insert(record)

        if not written:
            # Lost the race: whoever committed first is the answer.
            winner = self._attendance.get(today, class_code, student_id)
            if winner is None:
                raise StateError("Check-in could not be recorded, please retry.")
            return CheckinResult(status=winner.status, timestamp=winner.time_in, already_recorded=True)

        logger.info(
            "check-in %s %s %s -> %s (%+.1f min)",
            today.isoformat(),
            class_code,
            student_id,
            decision.status.value,
            decision.minutes_from_start,
        )
        return CheckinResult(status=decision.status, timestamp=stamp)

    def check_out(self, class_code: str, student_id: str, *, now: datetime | None = None) -> CheckoutResult:
        class_code = require_non_empty(class_code, "class_code")
        student_id = require_non_empty(student_id, "student_id")

        snap = self._calendar.snapshot(now)
        today = snap.today

        record = self._attendance.get(today, class_code, student_id)
        if not record:
            raise StateError(MUST_CHECK_IN_FIRST)
        if record.status is AttendanceStatus.EXCUSED:
            raise StateError(CANNOT_CHECK_OUT_EXCUSED)
        if record.status in PROVISIONAL and record.time_out is not None:
            return CheckoutResult(status=record.status, time_out=record.time_out, already_recorded=True)
        if record.status not in PROVISIONAL:
            raise StateError(f"Cannot check out while {record.status.value.lower()}.")

        stamp = snap.now.time().replace(microsecond=0)
        if not self._attendance.set_time_out(class_date=today, class_code=class_code, student_id=student_id, time_out=stamp):
            # The row moved on underneath us (e.g. finalized by the sweep).
            current = self._attendance.get(today, class_code, student_id)
            if current and current.status in PROVISIONAL and current.time_out is not None:
                return CheckoutResult(status=current.status, time_out=current.time_out, already_recorded=True)
            status = current.status.value.lower() if current else "not recorded"
            raise StateError(f"Cannot check out while {status}.")

        logger.info("check-out %s %s %s at %s", today.isoformat(), class_code, student_id, stamp.isoformat())
        return CheckoutResult(status=record.status, time_out=stamp)

    def file_excuse(
        self,
        class_code: str,
        student_id: str,
        reason: str,
        *,
        class_date: date | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        reason = require_min_length(reason, MIN_EXCUSE_REASON_LENGTH, INVALID_REASON)
        class_code = require_non_empty(class_code, "class_code")
        student_id = require_non_empty(student_id, "student_id")

        snap = self._calendar.snapshot(now)
        class_date = class_date or snap.today
        self._require_class(class_code)

        if self._attendance.get(class_date, class_code, student_id):
            raise ConflictError(EXCUSE_ALREADY_FILED)

        record = AttendanceRecord(
            class_date=class_date,
            class_code=class_code,
            student_id=student_id,
            status=AttendanceStatus.EXCUSED,
            time_in=snap.now.time().replace(microsecond=0),
            reason=reason,
        )
        if not self._attendance.insert(record):
            raise ConflictError(EXCUSE_ALREADY_FILED)

        logger.info("excuse filed %s %s %s", class_date.isoformat(), class_code, student_id)
        return record

    def get_record(
        self,
        class_code: str,
        student_id: str,
        *,
        class_date: date | None = None,
        now: datetime | None = None,
    ) -> Optional[AttendanceRecord]:
        class_date = class_date or self._calendar.snapshot(now).today
        return self._attendance.get(class_date, class_code, student_id)
