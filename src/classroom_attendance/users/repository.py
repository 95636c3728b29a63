from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_active_roster(self) -> Sequence[User]:
        """Active students and officers, ordered by name."""

        raise NotImplementedError
