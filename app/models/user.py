"""User model: identity, verification flag and the current one-time code."""
import uuid

from sqlalchemy import Boolean, Column, Date, String
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.session import Base
from app.db.types import UTCDateTime


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(50), nullable=False, default="")
    date_of_birth = Column(Date, nullable=True)
    password_hash = Column(String(255), nullable=True)  # absent for OTP-only and Google accounts
    google_id = Column(String(255), unique=True, nullable=True, index=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    # otp_code and otp_expires_at are set and cleared together
    otp_code = Column(String(6), nullable=True)
    otp_expires_at = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    notes = relationship("Note", back_populates="owner", cascade="all, delete-orphan")

    # plain-text password waiting for the store's hashing transform; never persisted
    pending_password = None

    def __init__(self, **kwargs):
        kwargs.setdefault("id", new_id())
        kwargs.setdefault("name", "")
        kwargs.setdefault("is_verified", False)
        super().__init__(**kwargs)

    @property
    def has_pending_otp(self) -> bool:
        return self.otp_code is not None

    def set_otp(self, code: str, expires_at) -> None:
        self.otp_code = code
        self.otp_expires_at = expires_at

    def clear_otp(self) -> None:
        self.otp_code = None
        self.otp_expires_at = None

    def set_password(self, plain: str) -> None:
        self.pending_password = plain
