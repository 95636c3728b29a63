from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.log import get_logger
from ..common.validators import optional_text, require_non_empty
from ..core.enums import AttendanceStatus, ClassOverride, EnrollmentAdjustment
from ..core.exceptions import AuthorizationError, ConfigError, ConflictError, NotFoundError, ValidationError
from ..schedules.index import ScheduleIndex
from ..schedules.model import ScheduleEntry
from ..semesters.service import CalendarService
from ..users.model import Identity
from ..users.repository import UserRepository
from .model import AttendanceRecord
from .precedence import may_overwrite
from .repository import AttendanceRepository

logger = get_logger("overrides")

SWEEP_FILL_STATUSES = frozenset({AttendanceStatus.ABSENT, AttendanceStatus.HOLIDAY})


def require_staff(actor: Identity) -> None:
    if not actor.role.is_staff:
        raise AuthorizationError("Unauthorized access.")


def require_self_or_staff(actor: Identity, student_id: str) -> None:
    if not actor.role.is_staff and actor.user_id != student_id:
        raise AuthorizationError("Students may only act on their own attendance.")


class OverrideService:
    """Ledger writes made on a student's behalf: class-wide declarations,
    make-up authorization, bulk credit/drop and the sweep's finalizers.

    Every path is either insert-if-absent or guarded by the shared
    precedence ranking, so none of them can demote a higher-ranked row.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleIndex,
        users: UserRepository,
        calendar: CalendarService,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._users = users
        self._calendar = calendar

    def _require_class(self, class_code: str) -> ScheduleEntry:
        entry = self._schedules.get(require_non_empty(class_code, "class_code"))
        if not entry:
            raise NotFoundError("Class not found")
        return entry

    def _roster_ids(self) -> list[str]:
        return [u.user_id for u in self._users.list_active_roster()]

    def declare_class_override(
        self,
        *,
        actor: Identity,
        class_code: str,
        class_date: date,
        override: ClassOverride,
        reason: Optional[str] = None,
    ) -> int:
        """Apply SUSPENDED/CANCELLED/ASYNCHRONOUS to every roster student, or
        NORMAL to remove synthetic rows and reopen ordinary check-in.

        Returns the number of rows written (or deleted for NORMAL).
        """
        require_staff(actor)
        entry = self._require_class(class_code)
        override = ClassOverride(override)

        if override is ClassOverride.NORMAL:
            removed = self._attendance.delete_synthetic(class_date=class_date, class_code=entry.class_code)
            logger.info("reset %s %s to normal (%d synthetic rows removed)", class_date, entry.class_code, removed)
            return removed

        status = AttendanceStatus(override.value)
        existing = {
            r.student_id: r.status
            for r in self._attendance.list_for_class(class_code=entry.class_code, class_date=class_date)
        }
        targets = [sid for sid in self._roster_ids() if may_overwrite(existing.get(sid), status)]
        written = self._attendance.upsert_synthetic(
            class_date=class_date,
            class_code=entry.class_code,
            student_ids=targets,
            status=status,
            reason=optional_text(reason),
        )
        logger.info("declared %s for %s on %s (%d rows) by %s", override.value, entry.class_code, class_date, written, actor.user_id)
        return written

    def authorize_makeup(self, *, actor: Identity, class_code: str, class_date: date) -> int:
        """Pre-authorize a make-up session: PENDING for every roster student lacking a row.

        Refuses when the class's professor already has ledger activity for
        another class on that date.
        """
        require_staff(actor)
        entry = self._require_class(class_code)

        if entry.professor_id:
            other_codes = [
                e.class_code
                for e in self._schedules.classes_taught_by(entry.professor_id)
                if e.class_code != entry.class_code
            ]
            if self._attendance.has_rows_for_classes(class_date=class_date, class_codes=other_codes):
                raise ConflictError(
                    f"Professor {entry.professor_id} already has another class recorded on {class_date.isoformat()}."
                )

        inserted = self._attendance.insert_missing(
            class_date=class_date,
            class_code=entry.class_code,
            student_ids=self._roster_ids(),
            status=AttendanceStatus.PENDING,
            makeup=True,
        )
        logger.info("make-up authorized for %s on %s (%d pending rows) by %s", entry.class_code, class_date, inserted, actor.user_id)
        return inserted

    def apply_enrollment_adjustment(
        self,
        *,
        actor: Identity,
        class_code: str,
        student_id: str,
        kind: EnrollmentAdjustment,
        now: datetime | None = None,
    ) -> list[date]:
        """CREDITED/DROPPED for every remaining occurrence from today through semester end.

        Past dates are never touched; dates holding a higher-ranked row are skipped.
        Returns the dates written.
        """
        student_id = require_non_empty(student_id, "student_id")
        require_self_or_staff(actor, student_id)
        kind = EnrollmentAdjustment(kind)

        snap = self._calendar.snapshot(now)
        semester = self._calendar.require_semester(snap)
        if kind is EnrollmentAdjustment.CREDITED and not semester.adjustment_open(snap.today):
            raise ConfigError(f"Adjustment period for Sem {semester.semester_id} has ended.")

        entry = self._require_class(class_code)
        if not self._schedules.offered_in(entry, semester):
            raise ValidationError(f"Class {entry.class_code} is not offered in the {semester.label}.")

        days = self._schedules.occurrences(entry, semester, start=snap.today)
        if not days:
            return []

        status = AttendanceStatus(kind.value)
        existing = {
            r.class_date: r.status
            for r in self._attendance.list_for_student(class_code=entry.class_code, student_id=student_id, days=days)
        }
        targets = [d for d in days if may_overwrite(existing.get(d), status)]

        self._attendance.upsert_many(
            [
                AttendanceRecord.synthetic_row(
                    class_date=d,
                    class_code=entry.class_code,
                    student_id=student_id,
                    status=status,
                )
                for d in targets
            ]
        )
        logger.info(
            "%s %s for %s: %d of %d remaining sessions",
            status.value,
            entry.class_code,
            student_id,
            len(targets),
            len(days),
        )
        return targets

    def fill_missing(self, *, class_date: date, class_code: str, status: AttendanceStatus) -> int:
        """Insert-if-absent a synthetic ABSENT/HOLIDAY row for every roster student."""
        if status not in SWEEP_FILL_STATUSES:
            raise ValidationError(f"{status.value} cannot be used to fill missing rows")
        return self._attendance.insert_missing(
            class_date=class_date,
            class_code=class_code,
            student_ids=self._roster_ids(),
            status=status,
        )

    def finalize_incomplete(self, *, class_date: date, class_code: str) -> int:
        return self._attendance.mark_incomplete(class_date=class_date, class_code=class_code)
