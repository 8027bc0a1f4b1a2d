"""
Form validation — runs before any store call.

validate_form() trims the raw input and returns an unsaved StudentRecord,
or raises ValidationError with a user-facing message.
"""

from student_records.exceptions import ValidationError
from student_records.manager.models import StudentForm
from student_records.store.models import (
    EDITABLE_FIELDS,
    EMAIL_RE,
    GRADE_LABELS,
    StudentRecord,
    is_valid_email,
)

__all__ = ["EMAIL_RE", "is_valid_email", "validate_form"]


def validate_form(form: StudentForm) -> StudentRecord:
    values = {name: (getattr(form, name) or "").strip() for name in EDITABLE_FIELDS}

    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError("All fields are required", fields=missing)

    if not is_valid_email(values["email"]):
        raise ValidationError("The email address format is not valid", fields=["email"])

    if values["grade"] not in GRADE_LABELS:
        raise ValidationError(f"Unknown grade: {values['grade']!r}", fields=["grade"])

    return StudentRecord(**values)
