"""Signup / login / verify / resend / Google sign-in orchestration.

Per email the account moves Unregistered -> PendingVerification -> Verified.
Signup and login both end in an emailed one-time code; login deliberately
uses the same OTP channel instead of a password check.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from app.core.errors import AuthError, ConflictError, NotFoundError, NotVerifiedError
from app.core.logging import mask_email
from app.core.security import TokenService
from app.models.user import User
from app.repositories.user import UserStore, normalize_email
from app.services.mailer import Mailer
from app.services.oauth import OAuthIdentity
from app.services.otp import OtpService

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    token: str
    user: User


class AuthService:
    def __init__(self, store: UserStore, otp: OtpService, tokens: TokenService, mailer: Mailer):
        self.store = store
        self.otp = otp
        self.tokens = tokens
        self.mailer = mailer

    async def signup(self, name: str, email: str, date_of_birth: date) -> User:
        """Create or refresh a pending account and email it a code.

        Repeating signup before verification just issues a new code.
        """
        email = normalize_email(email)
        user = await self.store.find_by_email(email)
        if user is not None and user.is_verified:
            raise ConflictError("User already exists with this email")

        if user is None:
            user = User(email=email, name=name, date_of_birth=date_of_birth, is_verified=False)
            logger.info("New signup for %s", mask_email(email))
        else:
            user.name = name
            user.date_of_birth = date_of_birth

        await self._issue_and_deliver(user)
        return user

    async def login(self, email: str) -> User:
        email = normalize_email(email)
        user = await self.store.find_by_email(email)
        if user is None:
            raise NotFoundError("No account found with this email")
        if not user.is_verified:
            raise NotVerifiedError("account not verified")

        await self._issue_and_deliver(user)
        return user

    async def resend(self, email: str) -> User:
        email = normalize_email(email)
        user = await self.store.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        await self._issue_and_deliver(user)
        return user

    async def verify(self, email: str, code: str) -> AuthResult:
        email = normalize_email(email)
        user = await self.store.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        try:
            await self.otp.verify(user, code)
        except AuthError as exc:
            logger.info("OTP rejected for %s: %s", mask_email(email), type(exc).__name__)
            raise

        user.is_verified = True
        user = await self.store.save(user)
        logger.info("Verified %s", mask_email(email))
        return AuthResult(token=self.tokens.issue(user.id), user=user)

    async def oauth_login(self, identity: OAuthIdentity) -> AuthResult:
        """Sign in with an identity the provider has already verified.

        Matches on the provider id first, then on email; an existing account
        found by email gets the provider id linked and counts as verified.
        """
        user = await self.store.find_by_external_id(identity.provider_id)
        if user is None:
            email = normalize_email(identity.email)
            if not identity.email_verified:
                raise AuthError("provider did not verify the email address")

            user = await self.store.find_by_email(email)
            if user is not None:
                if user.google_id and user.google_id != identity.provider_id:
                    raise ConflictError("Email is linked to a different Google account")
                logger.info("Linking Google account to %s", mask_email(email))
                user.google_id = identity.provider_id
                user.is_verified = True
                user.clear_otp()
            else:
                logger.info("Creating Google account for %s", mask_email(email))
                user = User(
                    email=email,
                    name=(identity.name or email.split("@")[0])[:50],
                    google_id=identity.provider_id,
                    is_verified=True,
                )
            user = await self.store.save(user)

        return AuthResult(token=self.tokens.issue(user.id), user=user)

    async def _issue_and_deliver(self, user: User) -> None:
        code = await self.otp.issue(user)
        try:
            await self.mailer.send_otp(user.email, code, user.name)
        except Exception:
            # leave nothing behind that claims a code went out
            user.clear_otp()
            await self.store.save(user)
            raise
