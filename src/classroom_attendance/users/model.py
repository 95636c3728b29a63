from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Roster entry. Credentials are owned by the identity collaborator, not stored here."""

    user_id: str
    name: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class Identity:
    """The acting user for one request, as asserted by the identity collaborator."""

    user_id: str
    role: Role
