"""Public projections of a user. Never include the password hash or OTP fields."""
from datetime import date, datetime

from app.schemas.base import CamelModel


class PublicUserSchema(CamelModel):
    id: str
    name: str
    email: str
    date_of_birth: date | None = None


class ProfileSchema(PublicUserSchema):
    is_verified: bool
    created_at: datetime


class ProfileResponse(CamelModel):
    user: ProfileSchema
