from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ScheduleEntry


class ScheduleRepository(Protocol):
    def get(self, class_code: str) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def list_for_weekday(self, weekday: str) -> Sequence[ScheduleEntry]:
        """Entries whose day set contains ``weekday`` (Mon..Sun)."""

        raise NotImplementedError

    def list_with_makeup_on(self, day: date) -> Sequence[ScheduleEntry]:
        """Entries holding a make-up ledger row on ``day``: PENDING, or marked
        as a make-up after the student checked in."""

        raise NotImplementedError

    def list_for_professor(self, professor_id: str) -> Sequence[ScheduleEntry]:
        raise NotImplementedError
