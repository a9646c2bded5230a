"""Employee name formatting.

Names are stored in mixed case across HR201 and DTR (USERINFO.NAME is
usually upper case). Everything shown to users goes through
`format_employee_name` so lists and reports read "Last, First Middle Ext".
"""

from __future__ import annotations

import re
from typing import Optional

_EXTENSION_RE = re.compile(r"^(jr|sr|ii|iii|iv|v|esq|phd|md)$|^(jr|sr|esq|phd|md)\.$", re.IGNORECASE)


def to_title_case(text: Optional[str]) -> str:
    if not text:
        return ""
    words = [w for w in text.lower().split(" ") if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


def is_name_extension(token: str) -> bool:
    return bool(_EXTENSION_RE.match(token or ""))


def format_employee_name(
    surname: Optional[str],
    firstname: Optional[str],
    middlename: Optional[str] = None,
    extension: Optional[str] = None,
) -> str:
    last = to_title_case((surname or "").strip())
    first = to_title_case((firstname or "").strip())
    middle = to_title_case((middlename or "").strip())
    ext = (extension or "").strip()

    if not last and not first:
        return ""

    if last and first:
        out = f"{last}, {first}"
        if middle:
            out += f" {middle}"
        if ext:
            out += f" {ext}"
        return out.strip()

    return " ".join(p for p in (last, first, middle, ext) if p).strip()


def format_employee_name_from_string(full_name: Optional[str], name_format: str = "auto") -> str:
    """Normalize a single-string name.

    Accepts "LAST, First Middle [Ext]" (comma form), "First Middle Last [Ext]"
    (``FirstLast``, the default guess for two or more words) and
    "Last First Middle [Ext]" (``LastFirst``).
    """

    if not full_name or not isinstance(full_name, str):
        return ""
    cleaned = full_name.strip()
    if not cleaned:
        return ""

    surname = firstname = middlename = extension = ""

    if "," in cleaned:
        last_part, *rest = [p.strip() for p in cleaned.split(",")]
        surname = last_part
        if rest:
            parts = " ".join(rest).split()
            firstname = parts[0] if parts else ""
            if len(parts) > 1 and is_name_extension(parts[-1]):
                extension = parts[-1]
                middlename = " ".join(parts[1:-1])
            else:
                middlename = " ".join(parts[1:])
        return format_employee_name(surname, firstname, middlename, extension)

    parts = cleaned.split()

    if name_format == "LastFirst":
        surname = parts[0]
        firstname = parts[1] if len(parts) > 1 else ""
        if len(parts) > 2:
            if is_name_extension(parts[-1]):
                extension = parts[-1]
                middlename = " ".join(parts[2:-1])
            else:
                middlename = " ".join(parts[2:])
        return format_employee_name(surname, firstname, middlename, extension)

    firstname = parts[0]
    if len(parts) == 2:
        surname = parts[1]
    elif len(parts) >= 3:
        if is_name_extension(parts[-1]):
            extension = parts[-1]
            surname = parts[-2]
            middlename = " ".join(parts[1:-2])
        else:
            surname = parts[-1]
            middlename = " ".join(parts[1:-1])
    return format_employee_name(surname, firstname, middlename, extension)
