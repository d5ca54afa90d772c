"""Credential store: persisted user records looked up by field."""
from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError
from app.core.security import hash_password
from app.models.user import User

logger = logging.getLogger(__name__)

UserTransform = Callable[[User], None]


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def hash_pending_password(user: User) -> None:
    """Pre-save transform: replace a pending plain-text password with its hash."""
    plain = getattr(user, "pending_password", None)
    if plain:
        user.password_hash = hash_password(plain)
        user.pending_password = None


DEFAULT_TRANSFORMS: tuple[UserTransform, ...] = (hash_pending_password,)


class UserStore(Protocol):
    async def find_by_email(self, email: str) -> User | None: ...

    async def find_by_id(self, user_id: str) -> User | None: ...

    async def find_by_external_id(self, external_id: str) -> User | None: ...

    async def save(self, user: User) -> User: ...

    async def consume_otp(self, user_id: str, code: str) -> bool: ...


class SqlAlchemyUserStore:
    """``UserStore`` over an ``AsyncSession``. Every call commits on its own."""

    def __init__(self, session: AsyncSession, transforms: Sequence[UserTransform] = DEFAULT_TRANSFORMS):
        self.session = session
        self.transforms = tuple(transforms)

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == normalize_email(email))
        return (await self.session.scalars(stmt)).one_or_none()

    async def find_by_id(self, user_id: str) -> User | None:
        return await self.session.get(User, user_id)

    async def find_by_external_id(self, external_id: str) -> User | None:
        stmt = select(User).where(User.google_id == external_id)
        return (await self.session.scalars(stmt)).one_or_none()

    async def save(self, user: User) -> User:
        """Insert or update ``user`` after running the pre-save transforms.

        Raises ``ConflictError`` when the email or Google id is already taken.
        """
        user.email = normalize_email(user.email)
        for transform in self.transforms:
            transform(user)

        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.info("Unique constraint rejected user save: %s", exc.orig)
            raise ConflictError("User already exists with this email") from exc
        await self.session.refresh(user)
        return user

    async def consume_otp(self, user_id: str, code: str) -> bool:
        """Clear the user's code only if it is still ``code``.

        Returns False when another request consumed or replaced it first.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.otp_code == code)
            .values(otp_code=None, otp_expires_at=None)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1
