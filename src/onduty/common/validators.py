from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value).strip()


def require_text(value: Any, field_name: str) -> str:
    """Like ``require_non_empty`` but refuses non-string values (JSON numbers, lists)."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string", field=field_name)
    return require_non_empty(value, field_name)


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters", field=field_name)
    return value
