"""Personal Data Sheet completeness.

The score counts fixed items across the four PDS pages: individual fields
on page 1-2, one item per repeating section, five slots for education and
four for the signature/photo/thumbmark/date block. Declarations (questions
34-40) are not scored.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, NamedTuple, Optional

from ..common.validators import is_blank
from .model import MissingField, PdsScore, PdsSnapshot

EDUCATION_SLOTS = 5
REQUIRED_REFERENCES = 3

EDUCATION_REQUIRED_COLUMNS = (
    "school_name",
    "degree_course",
    "period_from",
    "period_to",
    "highest_level_units",
    "year_graduated",
)


class FieldItem(NamedTuple):
    column: str
    label: str
    section: str
    page: int
    element_id: Optional[str] = None

    @property
    def target(self) -> str:
        return self.element_id or self.column


PERSONAL_FIELDS = (
    FieldItem("surname", "Surname", "Personal Information", 1),
    FieldItem("firstname", "First Name", "Personal Information", 1),
    FieldItem("middlename", "Middle Name", "Personal Information", 1),
    FieldItem("birthdate", "Birth Date", "Personal Information", 1),
    FieldItem("birthplace", "Birth Place", "Personal Information", 1),
    FieldItem("gender", "Gender", "Personal Information", 1),
    FieldItem("civil_status", "Civil Status", "Personal Information", 1),
    FieldItem("height", "Height", "Personal Information", 1),
    FieldItem("weight", "Weight", "Personal Information", 1),
    FieldItem("blood_type", "Blood Type", "Personal Information", 1),
    FieldItem("gsis", "GSIS ID", "Personal Information", 1),
    FieldItem("pagibig", "PAG-IBIG ID", "Personal Information", 1),
    FieldItem("philhealth", "PhilHealth ID", "Personal Information", 1),
    FieldItem("sss", "SSS ID", "Personal Information", 1),
    FieldItem("tin", "TIN", "Personal Information", 1),
    FieldItem("agency_no", "Agency Employee No.", "Personal Information", 1),
)

_ADDRESS_PARTS = (
    ("province", "Province"),
    ("city", "City"),
    ("barangay", "Barangay"),
    ("zip", "ZIP Code"),
    ("village", "Village"),
    ("street", "Street"),
)

ADDRESS_FIELDS = tuple(
    FieldItem(f"{prefix}_{part}", f"{kind} {label}", "Address Information", 1)
    for prefix, kind in (("resi", "Residential"), ("perma", "Permanent"))
    for part, label in _ADDRESS_PARTS
)

CONTACT_FIELDS = (
    FieldItem("telephone", "Telephone Number", "Contact Information", 1),
    FieldItem("mobile", "Mobile Number", "Contact Information", 1),
    FieldItem("email", "Email Address", "Contact Information", 1),
)

SPOUSE_FIELDS = (
    FieldItem("spouse_surname", "Spouse Surname", "Spouse Information", 2),
    FieldItem("spouse_firstname", "Spouse First Name", "Spouse Information", 2),
    FieldItem("spouse_middlename", "Spouse Middle Name", "Spouse Information", 2),
    FieldItem("spouse_occupation", "Spouse Occupation", "Spouse Information", 2),
)

PARENT_FIELDS = tuple(
    FieldItem(f"{who}_{part}", f"{who.title()} {label}", "Parent Information", 2)
    for who in ("father", "mother")
    for part, label in (("surname", "Surname"), ("firstname", "First Name"), ("middlename", "Middle Name"))
)

MEDIA_FIELDS = (
    FieldItem("signature_path", "Signature", "Signature & Photo", 4, "signature-section"),
    FieldItem("photo_path", "Photo", "Signature & Photo", 4, "photo-section"),
    FieldItem("thumb_path", "Right Thumbmark", "Signature & Photo", 4, "thumbmark-section"),
    FieldItem("date_accomplished", "Date Accomplished", "Signature & Photo", 4, "date-accomplished"),
)


class SectionItem(NamedTuple):
    label: str
    section: str
    element_id: str
    page: int
    is_filled: Callable[[PdsSnapshot], bool]


def _any_row(rows: Iterable[dict], *columns: str) -> bool:
    return any(not is_blank(r.get(c)) for r in rows for c in columns)


def complete_education_rows(rows: Iterable[dict]) -> int:
    return sum(1 for r in rows if all(not is_blank(r.get(c)) for c in EDUCATION_REQUIRED_COLUMNS))


SECTION_ITEMS = (
    SectionItem("Children Information", "Family Background", "children-section", 2,
                lambda s: _any_row(s.children, "name", "dateofbirth")),
    SectionItem("Civil Service Eligibility", "Eligibility Information", "eligibility-section", 2,
                lambda s: _any_row(s.eligibility, "career_service")),
    SectionItem("Work Experience", "Work History", "work-experience-section", 2,
                lambda s: _any_row(s.work_experience, "position_title", "department_name")),
    SectionItem("Voluntary Work", "Voluntary Work Information", "voluntary-section", 3,
                lambda s: bool(s.voluntary_work)),
    SectionItem("Training Programs", "Training Information", "training-section", 3,
                lambda s: bool(s.trainings)),
    SectionItem("Skills & Hobbies", "Other Information", "skills-section", 3,
                lambda s: bool(s.hobbies)),
    SectionItem("Recognition/Awards", "Other Information", "recognitions-section", 3,
                lambda s: bool(s.recognitions)),
    SectionItem("Memberships", "Other Information", "memberships-section", 3,
                lambda s: bool(s.memberships)),
    SectionItem("Character References", "References", "references-section", 4,
                lambda s: sum(1 for r in s.references if not is_blank(r.get("reference_name"))) >= REQUIRED_REFERENCES),
    SectionItem("Government IDs", "Government IDs", "gov-ids-section", 4,
                lambda s: _any_row(s.government_ids, "gov_id")),
)


def _field_groups(snapshot: PdsSnapshot):
    yield snapshot.employee, PERSONAL_FIELDS
    yield snapshot.address, ADDRESS_FIELDS
    yield snapshot.employee, CONTACT_FIELDS
    yield snapshot.spouse, SPOUSE_FIELDS
    yield snapshot.employee, PARENT_FIELDS
    yield snapshot.media, MEDIA_FIELDS


def score_pds(snapshot: PdsSnapshot) -> PdsScore:
    filled = 0
    total = 0

    for row, items in _field_groups(snapshot):
        total += len(items)
        filled += sum(1 for item in items if not is_blank((row or {}).get(item.column)))

    total += EDUCATION_SLOTS
    filled += min(complete_education_rows(snapshot.education), EDUCATION_SLOTS)

    total += len(SECTION_ITEMS)
    filled += sum(1 for item in SECTION_ITEMS if item.is_filled(snapshot))

    return PdsScore(filled=filled, total=total)


def find_missing_fields(snapshot: PdsSnapshot) -> List[MissingField]:
    """Unfilled scored items, each pointing at the form element to focus."""

    missing: List[MissingField] = []

    for row, items in _field_groups(snapshot):
        for item in items:
            if not is_blank((row or {}).get(item.column)):
                continue
            missing.append(MissingField(item.label, item.section, item.target, item.page))

        if items is PARENT_FIELDS:
            # Page 2 order: family background, then education, then the rest.
            children = SECTION_ITEMS[0]
            if not children.is_filled(snapshot):
                missing.append(MissingField(children.label, children.section, children.element_id, children.page))
            if complete_education_rows(snapshot.education) < EDUCATION_SLOTS:
                missing.append(MissingField("Education Background", "Education Information", "education-section", 2))
            for item in SECTION_ITEMS[1:]:
                if not item.is_filled(snapshot):
                    missing.append(MissingField(item.label, item.section, item.element_id, item.page))

    return missing


def group_missing_fields(missing: Iterable[MissingField]) -> dict:
    """``{page: {section: [field dicts]}}`` in first-seen order."""

    grouped: dict = {}
    for m in missing:
        grouped.setdefault(m.page, {}).setdefault(m.section, []).append(m.to_dict())
    return grouped
