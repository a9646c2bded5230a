from werkzeug.security import generate_password_hash

from lgu_hris.common.passwords import legacy_hash, sanitize_portal_pin, verify_password
from lgu_hris.common.validators import is_blank


def test_legacy_hash_fits_varchar_50():
    assert len(legacy_hash("secret")) == 50


def test_verify_password_accepts_both_hash_kinds():
    assert verify_password("secret", generate_password_hash("secret"))
    assert verify_password("secret", legacy_hash("secret"))
    assert not verify_password("wrong", legacy_hash("secret"))
    assert not verify_password("secret", None)


def test_portal_pin_keeps_up_to_six_digits():
    assert sanitize_portal_pin("12-34-56-78") == "123456"
    assert sanitize_portal_pin(98765) == "98765"


def test_portal_pin_falls_back_when_too_short():
    assert sanitize_portal_pin("12") == "1234"
    assert sanitize_portal_pin("ab", fallback="9876") == "9876"
    assert sanitize_portal_pin(None, fallback="") == "1234"


def test_is_blank():
    for value in (None, "", "  ", "null", "undefined", "0000-00-00", 0, 0.0):
        assert is_blank(value)
    for value in ("x", 5, False):
        assert not is_blank(value)
