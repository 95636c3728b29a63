from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles supplied by the identity collaborator."""

    STUDENT = "student"
    OFFICER = "officer"
    PROFESSOR = "professor"
    ADMIN = "admin"

    @property
    def is_staff(self) -> bool:
        return self is not Role.STUDENT


ROSTER_ROLES = (Role.STUDENT, Role.OFFICER)


class AttendanceStatus(str, Enum):
    """Closed set of statuses stored in the ledger.

    NOT_RECORDED is virtual: it is never persisted and stands for the
    absence of a row.
    """

    NOT_RECORDED = "NOT_RECORDED"
    PRESENT = "PRESENT"
    LATE = "LATE"
    INCOMPLETE = "INCOMPLETE"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"
    HOLIDAY = "HOLIDAY"
    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"
    ASYNCHRONOUS = "ASYNCHRONOUS"
    PENDING = "PENDING"
    CREDITED = "CREDITED"
    DROPPED = "DROPPED"


class ClassOverride(str, Enum):
    """Statuses staff may declare for a whole class on one date.

    NORMAL is a pseudo-status: it removes synthetic rows instead of writing.
    """

    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"
    ASYNCHRONOUS = "ASYNCHRONOUS"
    NORMAL = "NORMAL"


class EnrollmentAdjustment(str, Enum):
    """Self-service bulk adjustment applied to the rest of a semester."""

    CREDITED = "CREDITED"
    DROPPED = "DROPPED"
