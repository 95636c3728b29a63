from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Iterable, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    in_placeholders,
    is_duplicate_key,
    normalize_mysql_date,
    normalize_mysql_time,
)
from .model import AttendanceRecord
from .precedence import PROVISIONAL
from .repository import AttendanceRepository

_COLUMNS = "class_date, class_code, student_id, attendance_status, time_in, time_out, is_synthetic, reason, is_makeup"
_VALUES = "(%s,%s,%s,%s,%s,%s,%s,%s,%s)"

_UPSERT_SQL = f"""
    INSERT INTO attendance ({_COLUMNS})
    VALUES {_VALUES}
    ON DUPLICATE KEY UPDATE
        attendance_status=VALUES(attendance_status),
        time_in=VALUES(time_in),
        time_out=VALUES(time_out),
        is_synthetic=VALUES(is_synthetic),
        reason=VALUES(reason),
        is_makeup=GREATEST(is_makeup, VALUES(is_makeup))
"""

_PROVISIONAL_VALUES = tuple(sorted(s.value for s in PROVISIONAL))


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        class_date=normalize_mysql_date(r["class_date"]),
        class_code=str(r["class_code"]),
        student_id=str(r["student_id"]),
        status=AttendanceStatus(r["attendance_status"]),
        time_in=normalize_mysql_time(r.get("time_in")),
        time_out=normalize_mysql_time(r.get("time_out")),
        synthetic=bool(r.get("is_synthetic")),
        reason=r.get("reason"),
        makeup=bool(r.get("is_makeup")),
    )


def _params(rec: AttendanceRecord) -> tuple:
    return (
        rec.class_date,
        rec.class_code,
        rec.student_id,
        rec.status.value,
        rec.time_in,
        rec.time_out,
        1 if rec.synthetic else 0,
        rec.reason,
        1 if rec.makeup else 0,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, class_date: date, class_code: str, student_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE class_date=%s AND class_code=%s AND student_id=%s
                """,
                (class_date, class_code, student_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert(self, record: AttendanceRecord) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO attendance ({_COLUMNS}) VALUES {_VALUES}",
                    _params(record),
                )
        except IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise
        return True

    def replace_if_status(self, record: AttendanceRecord, *, expected: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET attendance_status=%s, time_in=%s, time_out=%s, is_synthetic=%s, reason=%s, is_makeup=%s
                WHERE class_date=%s AND class_code=%s AND student_id=%s AND attendance_status=%s
                """,
                (
                    record.status.value,
                    record.time_in,
                    record.time_out,
                    1 if record.synthetic else 0,
                    record.reason,
                    1 if record.makeup else 0,
                    record.class_date,
                    record.class_code,
                    record.student_id,
                    expected.value,
                ),
            )
            return cur.rowcount > 0

    def upsert(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT_SQL, _params(record))

    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_UPSERT_SQL, [_params(r) for r in records])
        return len(records)

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
        wanted = list(dict.fromkeys(student_ids))
        if not wanted:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id FROM attendance WHERE class_date=%s AND class_code=%s",
                (class_date, class_code),
            )
            existing = {str(r["student_id"]) for r in fetchall(cur)}
            missing = [sid for sid in wanted if sid not in existing]
            if not missing:
                return 0

            # IGNORE only absorbs rows a concurrent check-in inserted after the SELECT.
            cur.executemany(
                f"INSERT IGNORE INTO attendance ({_COLUMNS}) VALUES {_VALUES}",
                [
                    _params(
                        AttendanceRecord.synthetic_row(
                            class_date=class_date,
                            class_code=class_code,
                            student_id=sid,
                            status=status,
                            reason=reason,
                            makeup=makeup,
                        )
                    )
                    for sid in missing
                ],
            )
            return max(int(cur.rowcount), 0)

    def upsert_synthetic(
        self,
        *,
        class_date: date,
        class_code: str,
        student_ids: Iterable[str],
        status: AttendanceStatus,
        reason: Optional[str] = None,
    ) -> int:
        records = [
            AttendanceRecord.synthetic_row(
                class_date=class_date,
                class_code=class_code,
                student_id=sid,
                status=status,
                reason=reason,
            )
            for sid in dict.fromkeys(student_ids)
        ]
        return self.upsert_many(records)

    def delete_synthetic(self, *, class_date: date, class_code: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance WHERE class_date=%s AND class_code=%s AND is_synthetic=1",
                (class_date, class_code),
            )
            return int(cur.rowcount)

    def set_time_out(self, *, class_date: date, class_code: str, student_id: str, time_out: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance
                SET time_out=%s
                WHERE class_date=%s AND class_code=%s AND student_id=%s
                  AND time_out IS NULL
                  AND attendance_status IN ({in_placeholders(_PROVISIONAL_VALUES)})
                """,
                (time_out, class_date, class_code, student_id, *_PROVISIONAL_VALUES),
            )
            return cur.rowcount > 0

    def mark_incomplete(self, *, class_date: date, class_code: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance
                SET attendance_status=%s
                WHERE class_date=%s AND class_code=%s
                  AND time_out IS NULL
                  AND attendance_status IN ({in_placeholders(_PROVISIONAL_VALUES)})
                """,
                (AttendanceStatus.INCOMPLETE.value, class_date, class_code, *_PROVISIONAL_VALUES),
            )
            return int(cur.rowcount)

    def list_for_student(self, *, class_code: str, student_id: str, days: Sequence[date]) -> Sequence[AttendanceRecord]:
        if not days:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE class_code=%s AND student_id=%s AND class_date IN ({in_placeholders(days)})
                ORDER BY class_date ASC
                """,
                (class_code, student_id, *days),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_class(self, *, class_code: str, class_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        clauses = ["class_code=%s"]
        params: list[object] = [class_code]
        if class_date is not None:
            clauses.append("class_date=%s")
            params.append(class_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {where}
                ORDER BY class_date ASC, student_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def has_rows_for_classes(self, *, class_date: date, class_codes: Sequence[str]) -> bool:
        if not class_codes:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT 1 AS found
                FROM attendance
                WHERE class_date=%s AND class_code IN ({in_placeholders(class_codes)})
                LIMIT 1
                """,
                (class_date, *class_codes),
            )
            return fetchone(cur) is not None
