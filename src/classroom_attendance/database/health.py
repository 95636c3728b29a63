from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchone


class HealthProbe(Protocol):
    def server_time(self) -> Optional[datetime]:
        raise NotImplementedError


class MySQLHealthProbe(HealthProbe):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def server_time(self) -> Optional[datetime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT NOW() AS server_time")
            row = fetchone(cur)
            return row["server_time"] if row else None
