"""Field-level validation for user input.

Each parse_* function takes the raw text typed by the user and returns the
cleaned value, raising ValidationFailure with a user-facing message when the
text does not satisfy the field's format rules.
"""

import re
from datetime import date

from ..store.types import (
    BIRTH_YEAR_MAX,
    BIRTH_YEAR_MIN,
    EMAIL_MAX_LENGTH,
    EMAIL_MIN_LENGTH,
    EMAIL_REGEX,
    ID_REGEX,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    Record,
    Role,
)
from .dates import parse_display_date

ID_PATTERN = re.compile(ID_REGEX)
EMAIL_PATTERN = re.compile(EMAIL_REGEX)


class ValidationFailure(ValueError):
    field: str
    message: str

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


def parse_id(text: str) -> str:
    value = text.strip()
    if not ID_PATTERN.match(value):
        raise ValidationFailure("id", "The ID must contain exactly 11 digits")
    return value


def parse_full_name(text: str) -> str:
    value = text.strip()
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise ValidationFailure(
            "full_name",
            f"The full name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
        )
    return value


def parse_email(text: str) -> str:
    value = text.strip()
    if any(ch.isspace() for ch in value):
        raise ValidationFailure("email", "The email must not contain spaces")
    if not EMAIL_PATTERN.match(value):
        raise ValidationFailure("email", "The email must be of the form name@domain.com or name@domain.br")
    if not EMAIL_MIN_LENGTH <= len(value) <= EMAIL_MAX_LENGTH:
        raise ValidationFailure(
            "email",
            f"The email must be between {EMAIL_MIN_LENGTH} and {EMAIL_MAX_LENGTH} characters",
        )
    return value


def parse_birth_date(text: str) -> date:
    try:
        value = parse_display_date(text)
    except ValueError:
        raise ValidationFailure("birth_date", "Invalid date, use the format DD-MM-YYYY") from None
    if not BIRTH_YEAR_MIN <= value.year <= BIRTH_YEAR_MAX:
        raise ValidationFailure(
            "birth_date",
            f"The birth year must be between {BIRTH_YEAR_MIN} and {BIRTH_YEAR_MAX}",
        )
    return value


def parse_role(text: str) -> Role:
    wanted = text.strip().lower()
    for role in Role:
        if role.value.lower() == wanted:
            return role
    choices = "/".join(role.value for role in Role)
    raise ValidationFailure("role", f"Invalid role, choose one of {choices}")


def build_record(record_id: str, full_name: str, email: str, birth: str, role: str) -> Record:
    """Validate every raw field and assemble a Record, failing on the first bad field."""
    return Record(
        id=parse_id(record_id),
        full_name=parse_full_name(full_name),
        email=parse_email(email),
        birth_date=parse_birth_date(birth),
        role=parse_role(role),
    )
