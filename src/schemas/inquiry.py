"""Inquiry schemas."""

import re
from datetime import datetime
from typing import Literal

from pydantic import field_validator

from src.schemas.base import InputModel, NonEmptyStr, OutputModel

InquiryStatus = Literal["new", "contacted", "qualified", "closed"]

# Syntax only; deliverability is never checked.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class InquiryCreate(InputModel):
    """Contact form submitted by a visitor."""

    inquirer_name: NonEmptyStr
    inquirer_email: NonEmptyStr
    inquirer_phone: str | None = None
    message: str | None = None

    @field_validator("inquirer_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("value is not a valid email address")
        return value

    @field_validator("inquirer_phone", "message")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None


class InquiryOut(OutputModel):
    id: int
    property_id: int | None
    agent_id: str
    inquirer_name: str
    inquirer_email: str
    inquirer_phone: str | None
    message: str | None
    status: str
    created_at: datetime
