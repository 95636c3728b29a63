from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    """Stripped text of a free-form field; blank or missing becomes None."""
    if value is None:
        return None
    return str(value).strip() or None


def require_min_length(value: str, min_len: int, message: str) -> str:
    stripped = optional_text(value) or ""
    if len(stripped) < min_len:
        raise ValidationError(message)
    return stripped
