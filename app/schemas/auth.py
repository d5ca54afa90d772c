"""Pydantic schemas for the signup / login / OTP endpoints."""
from datetime import date, datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import field_validator

from app.schemas.base import CamelModel
from app.schemas.user import PublicUserSchema

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50


def _check_email(value: str) -> str:
    try:
        checked = validate_email((value or "").strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please provide a valid email address")
    return checked.normalized.lower()


class EmailRequest(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def email_syntax(cls, v: str) -> str:
        return _check_email(v)


class SignupRequest(EmailRequest):
    name: str
    date_of_birth: date

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < NAME_MIN_LENGTH:
            raise ValueError(f"Name must be at least {NAME_MIN_LENGTH} characters long")
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError(f"Name must not exceed {NAME_MAX_LENGTH} characters")
        return v

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def iso_date(cls, v):
        if isinstance(v, date):
            return v
        if not isinstance(v, str):
            raise ValueError("Please provide a valid date")
        try:
            return date.fromisoformat(v)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError("Please provide a valid date")

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class LoginRequest(EmailRequest):
    pass


class ResendOtpRequest(EmailRequest):
    pass


class VerifyOtpRequest(EmailRequest):
    otp: str

    @field_validator("otp")
    @classmethod
    def six_digits(cls, v: str) -> str:
        if len(v) != 6:
            raise ValueError("OTP must be 6 digits")
        if not v.isascii() or not v.isdigit():
            raise ValueError("OTP must contain only numbers")
        return v


class OtpSentResponse(CamelModel):
    message: str
    email: str


class VerifyOtpResponse(CamelModel):
    message: str
    token: str
    user: PublicUserSchema
