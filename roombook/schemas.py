"""
Request schemas (structural validation only).

Domain rules such as "not in the past" or "no overlap" live in the services;
these models only check shape, lengths and formats.
"""

import re
from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from roombook.errors import ValidationError
from roombook.types import RECURRENCE_KINDS
from roombook.utils.helpers import normalize_email
from roombook.utils.time_utils import to_utc_naive

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

DayOfWeek = Annotated[int, Field(ge=0, le=6)]


class BookingCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    room_id: int = Field(gt=0)
    creator_name: str = Field(min_length=3, max_length=100)
    creator_email: str = Field(max_length=255)
    title: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    start_time: datetime
    end_time: datetime
    is_recurring: bool = False
    recurrence_type: Optional[Literal[RECURRENCE_KINDS]] = None
    # A timestamp is kept whole so the service can take its date in the branch timezone
    recurrence_end_date: Optional[Union[datetime, date]] = None
    days_of_week: Optional[List[DayOfWeek]] = None

    @field_validator('creator_email')
    @classmethod
    def validate_email(cls, value, info: ValidationInfo):
        email = normalize_email(value)
        if not EMAIL_PATTERN.match(email):
            raise ValueError("Invalid email address.")

        allowed_domain = (info.context or {}).get('allowed_email_domain')
        if allowed_domain and not email.endswith(f"@{allowed_domain.lower()}"):
            raise ValueError("Only corporate email addresses are allowed.")
        return email

    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_timestamp(cls, value):
        return to_utc_naive(value)

    @field_validator('recurrence_end_date', mode='before')
    @classmethod
    def parse_end_date(cls, value):
        # Browsers tend to send a full ISO timestamp for a date picker
        if isinstance(value, str) and value:
            if 'T' in value:
                return datetime.fromisoformat(value.replace('Z', '+00:00'))
            return date.fromisoformat(value)
        return value

    @field_validator('description')
    @classmethod
    def blank_description_is_none(cls, value):
        return value or None


class CancellationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(default='', max_length=255)


class CancellationConfirm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    token: str = Field(default='', max_length=16)


def first_error_message(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    if error['type'] == 'value_error' and 'error' in error.get('ctx', {}):
        return str(error['ctx']['error'])
    field = '.'.join(str(part) for part in error['loc'])
    return f"Invalid {field}: {error['msg']}"


def parse_booking(payload, allowed_email_domain=None) -> BookingCreate:
    """Validate raw input, raising the domain ValidationError with the first problem."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid data.")
    try:
        return BookingCreate.model_validate(
            payload, context={'allowed_email_domain': allowed_email_domain}
        )
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e)) from e
