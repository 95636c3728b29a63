from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import ROSTER_ROLES, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import User
from .repository import UserRepository


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=str(row["user_id"]),
        name=row["user_name"],
        role=Role(row["user_role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, user_name, user_role, is_active FROM users WHERE user_id=%s",
                (user_id,),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_active_roster(self) -> Sequence[User]:
        placeholders = in_placeholders(ROSTER_ROLES)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, user_name, user_role, is_active
                FROM users
                WHERE is_active=1 AND user_role IN ({placeholders})
                ORDER BY user_name ASC
                """,
                tuple(r.value for r in ROSTER_ROLES),
            )
            return [_to_user(r) for r in fetchall(cur)]
