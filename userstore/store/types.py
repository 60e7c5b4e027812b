from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

ID_REGEX = r"^[0-9]{11}$"
EMAIL_REGEX = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.(com|br)$"

NAME_MIN_LENGTH = 10
NAME_MAX_LENGTH = 100
EMAIL_MIN_LENGTH = 15
EMAIL_MAX_LENGTH = 50
BIRTH_YEAR_MIN = 1909
BIRTH_YEAR_MAX = 2024


class Role(str, Enum):
    Admin = "Admin"
    User = "User"
    Guest = "Guest"


class Record(BaseModel):
    """A validated user entry, keyed by its 11-digit id."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(pattern=ID_REGEX)
    full_name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: str = Field(pattern=EMAIL_REGEX, min_length=EMAIL_MIN_LENGTH, max_length=EMAIL_MAX_LENGTH)
    birth_date: date = Field(alias="birth")
    role: Role

    @field_validator("birth_date")
    @classmethod
    def _birth_year_in_range(cls, value: date) -> date:
        if not BIRTH_YEAR_MIN <= value.year <= BIRTH_YEAR_MAX:
            raise ValueError(f"birth year must be between {BIRTH_YEAR_MIN} and {BIRTH_YEAR_MAX}")
        return value

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
