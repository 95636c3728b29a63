from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """The attendance ledger. The composite key is the only concurrency guard."""

    def get(self, class_date: date, class_code: str, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> bool:
        """Insert a new row. Returns False (no error) when the key already exists."""

        raise NotImplementedError

    def replace_if_status(self, record: AttendanceRecord, *, expected: AttendanceStatus) -> bool:
        """Overwrite the row only while it still holds ``expected``."""

        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        """Insert-or-overwrite every record; safe to retry after partial application."""

        raise NotImplementedError

    def insert_missing(
        self,
        *,
        class_date: date,
        class_code: str,
        student_ids: Iterable[str],
        status: AttendanceStatus,
        reason: Optional[str] = None,
        makeup: bool = False,
    ) -> int:
        """Insert synthetic rows only for students lacking any row. Returns rows inserted."""

        raise NotImplementedError

    def upsert_synthetic(
        self,
        *,
        class_date: date,
        class_code: str,
        student_ids: Iterable[str],
        status: AttendanceStatus,
        reason: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def delete_synthetic(self, *, class_date: date, class_code: str) -> int:
        raise NotImplementedError

    def set_time_out(self, *, class_date: date, class_code: str, student_id: str, time_out: time) -> bool:
        """Set time_out while the row is PRESENT/LATE with no time_out yet."""

        raise NotImplementedError

    def mark_incomplete(self, *, class_date: date, class_code: str) -> int:
        """PRESENT/LATE rows without time_out become INCOMPLETE. Returns rows changed."""

        raise NotImplementedError

    def list_for_student(self, *, class_code: str, student_id: str, days: Sequence[date]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_class(self, *, class_code: str, class_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def has_rows_for_classes(self, *, class_date: date, class_codes: Sequence[str]) -> bool:
        raise NotImplementedError
