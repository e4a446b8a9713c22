from __future__ import annotations

from typing import Optional

from ..core.exceptions import InvalidInput


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise InvalidInput(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise InvalidInput(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
