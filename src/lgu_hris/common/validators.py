from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_digits(value: str, field_name: str, length: int) -> str:
    value = (value or "").strip()
    if len(value) != length or not value.isdigit():
        raise ValidationError(f"{field_name} must be exactly {length} digits")
    return value


def require_int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def is_blank(value) -> bool:
    """True for values the PDS forms treat as not filled in."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in {"", "null", "undefined", "0000-00-00"}
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def as_flag(value, default: bool = False) -> bool:
    """Checkbox-style values from JSON or form posts."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("0", "false", "no", "off")
