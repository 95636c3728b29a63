from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_date
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, day: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_date, holiday_name, holiday_type FROM holidays WHERE holiday_date=%s",
                (day,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Holiday(
                holiday_date=normalize_mysql_date(r["holiday_date"]),
                name=r["holiday_name"],
                holiday_type=r["holiday_type"],
            )
