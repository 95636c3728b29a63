"""Single precedence ranking shared by every write path and every read model.

Class-wide SUSPENDED/CANCELLED/ASYNCHRONOUS > HOLIDAY > PENDING > EXCUSED
> CREDITED/DROPPED > ordinary lifecycle (PRESENT/LATE/ABSENT/INCOMPLETE).
"""
from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceStatus as S

_RANK = {
    S.SUSPENDED: 60,
    S.CANCELLED: 60,
    S.ASYNCHRONOUS: 60,
    S.HOLIDAY: 50,
    S.PENDING: 40,
    S.EXCUSED: 30,
    S.CREDITED: 20,
    S.DROPPED: 20,
    S.PRESENT: 10,
    S.LATE: 10,
    S.ABSENT: 10,
    S.INCOMPLETE: 10,
    S.NOT_RECORDED: 0,
}

CLASS_WIDE = frozenset({S.SUSPENDED, S.CANCELLED, S.ASYNCHRONOUS})
PROVISIONAL = frozenset({S.PRESENT, S.LATE})


def rank(status: Optional[S]) -> int:
    if status is None:
        return 0
    return _RANK[S(status)]


def may_overwrite(existing: Optional[S], incoming: S, *, attended: bool = False) -> bool:
    """Whether ``incoming`` may replace the row currently holding ``existing``.

    A real check-in (``attended``) supersedes a PENDING make-up row.
    """
    if existing is None or existing is S.NOT_RECORDED:
        return True
    if attended and existing is S.PENDING:
        return True
    return rank(incoming) >= rank(existing)


def effective_status(row_status: Optional[S], *, holiday: bool = False) -> S:
    """Status to render when the row and the holiday calendar disagree."""
    current = row_status or S.NOT_RECORDED
    if holiday and rank(S.HOLIDAY) > rank(current):
        return S.HOLIDAY
    return current


def counts_as_present(status: S) -> bool:
    return status in PROVISIONAL or status is S.CREDITED
