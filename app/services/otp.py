"""One-time codes: issue, expire and verify 6-digit numeric codes bound to a user."""
from __future__ import annotations

import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy.orm.attributes import set_committed_value

from app.core.clock import as_utc, utcnow
from app.core.errors import NoCodeIssuedError, OtpExpiredError, OtpMismatchError
from app.core.logging import mask_email
from app.models.user import User
from app.repositories.user import UserStore

logger = logging.getLogger(__name__)

OTP_LENGTH = 6
DEFAULT_TTL_MINUTES = 10


def generate_otp_code(length: int = OTP_LENGTH) -> str:
    """Uniform random code over 0..10**length-1, zero-padded."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class OtpService:
    """At most one live code per user: issuing always overwrites the previous one."""

    def __init__(
        self,
        store: UserStore,
        ttl_minutes: int = DEFAULT_TTL_MINUTES,
        clock: Callable[[], datetime] = utcnow,
        generator: Callable[[], str] = generate_otp_code,
    ):
        self.store = store
        self.ttl = timedelta(minutes=ttl_minutes)
        self.clock = clock
        self.generator = generator

    async def issue(self, user: User) -> str:
        code = self.generator()
        user.set_otp(code, self.clock() + self.ttl)
        await self.store.save(user)
        logger.info("Issued OTP for %s", mask_email(user.email))
        return code

    async def verify(self, user: User, submitted: str) -> None:
        """Check ``submitted`` against the user's code and consume it on success.

        Only success clears the code; a mismatch or an expired attempt leaves
        it in place. The code is valid up to and including ``otp_expires_at``.
        """
        if not user.has_pending_otp:
            raise NoCodeIssuedError("no code outstanding")

        if not hmac.compare_digest(user.otp_code.encode(), (submitted or "").encode()):
            raise OtpMismatchError("code mismatch")

        if self.clock() > as_utc(user.otp_expires_at):
            raise OtpExpiredError("code expired")

        if not await self.store.consume_otp(user.id, user.otp_code):
            # consumed or replaced by a concurrent request
            raise NoCodeIssuedError("no code outstanding")
        # the row is already cleared; mirror it without marking the fields dirty
        set_committed_value(user, "otp_code", None)
        set_committed_value(user, "otp_expires_at", None)
