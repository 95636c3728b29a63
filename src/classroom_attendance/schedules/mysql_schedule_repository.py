from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from .model import ScheduleEntry
from .repository import ScheduleRepository

_COLUMNS = """
    s.class_code, s.class_name, s.days, s.start_time, s.end_time,
    s.semester, s.academic_year, s.professor_id, s.cycle_start, s.cycle_end
"""


def _parse_days(value: str) -> frozenset[str]:
    return frozenset(d.strip() for d in (value or "").split(",") if d.strip())


def _to_entry(r: Dict[str, Any]) -> ScheduleEntry:
    return ScheduleEntry(
        class_code=str(r["class_code"]),
        class_name=r.get("class_name") or "",
        days=_parse_days(r["days"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        semester=str(r["semester"]),
        academic_year=str(r["academic_year"]),
        professor_id=r.get("professor_id"),
        cycle_start=normalize_mysql_date(r.get("cycle_start")),
        cycle_end=normalize_mysql_date(r.get("cycle_end")),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, class_code: str) -> Optional[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedules s WHERE s.class_code=%s", (class_code,))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_weekday(self, weekday: str) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedules s
                WHERE FIND_IN_SET(%s, REPLACE(s.days, ' ', '')) > 0
                ORDER BY s.start_time ASC, s.class_code ASC
                """,
                (weekday,),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_with_makeup_on(self, day: date) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedules s
                WHERE EXISTS (
                    SELECT 1 FROM attendance a
                    WHERE a.class_code = s.class_code
                      AND a.class_date = %s
                      AND (a.is_makeup = 1 OR a.attendance_status = %s)
                )
                ORDER BY s.start_time ASC, s.class_code ASC
                """,
                (day, AttendanceStatus.PENDING.value),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_professor(self, professor_id: str) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedules s WHERE s.professor_id=%s ORDER BY s.class_code ASC",
                (professor_id,),
            )
            return [_to_entry(r) for r in fetchall(cur)]
