from __future__ import annotations

import hashlib
import hmac
import re
from typing import Optional

from werkzeug.security import check_password_hash

from ..core.constants import DEFAULT_PORTAL_PIN, LEGACY_HASH_LENGTH, PORTAL_PIN_MAX_DIGITS, PORTAL_PIN_MIN_DIGITS


def legacy_hash(text: str) -> str:
    """SHA-256 hex cut to fit the VARCHAR(50) password columns."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:LEGACY_HASH_LENGTH]


def verify_password(password: str, stored: Optional[str]) -> bool:
    """Check werkzeug hashes first, then the legacy truncated SHA-256."""

    if not password or not stored:
        return False
    try:
        if check_password_hash(stored, password):
            return True
    except (ValueError, TypeError):
        # Not a werkzeug hash string (legacy rows, placeholders).
        pass
    return hmac.compare_digest(legacy_hash(password), stored)


def sanitize_portal_pin(value, fallback: str = DEFAULT_PORTAL_PIN) -> str:
    """Digits only, at most six; falls back when fewer than four remain."""

    cleaned = re.sub(r"\D", "", "" if value is None else str(value))[:PORTAL_PIN_MAX_DIGITS]
    if len(cleaned) >= PORTAL_PIN_MIN_DIGITS:
        return cleaned
    fallback_cleaned = re.sub(r"\D", "", "" if fallback is None else str(fallback))[:PORTAL_PIN_MAX_DIGITS]
    return fallback_cleaned or DEFAULT_PORTAL_PIN
