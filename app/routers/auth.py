"""Auth routes: OTP signup/login/verify/resend and Google sign-in."""
from __future__ import annotations

import hmac
import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from app.core.config import Settings
from app.core.errors import AppError, ProviderNotConfiguredError
from app.deps import get_app_settings, get_auth_service, get_oauth_client, rate_limit
from app.schemas.auth import (
    LoginRequest,
    OtpSentResponse,
    ResendOtpRequest,
    SignupRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from app.schemas.base import MessageResponse
from app.schemas.user import PublicUserSchema
from app.services.auth import AuthService
from app.services.oauth import GoogleOAuthClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

Auth = Annotated[AuthService, Depends(get_auth_service)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
OAuth = Annotated[GoogleOAuthClient, Depends(get_oauth_client)]


@router.post("/signup", response_model=OtpSentResponse, dependencies=[Depends(rate_limit("auth"))])
async def signup(body: SignupRequest, auth: Auth):
    """Create (or refresh) a pending account and email a code."""
    user = await auth.signup(body.name, body.email, body.date_of_birth)
    return OtpSentResponse(message="OTP sent to your email address", email=user.email)


@router.post("/login", response_model=OtpSentResponse, dependencies=[Depends(rate_limit("auth"))])
async def login(body: LoginRequest, auth: Auth):
    """Email a fresh code to a verified account."""
    user = await auth.login(body.email)
    return OtpSentResponse(message="OTP sent to your email address", email=user.email)


@router.post("/verify-otp", response_model=VerifyOtpResponse, dependencies=[Depends(rate_limit("auth"))])
async def verify_otp(body: VerifyOtpRequest, auth: Auth):
    result = await auth.verify(body.email, body.otp)
    return VerifyOtpResponse(
        message="OTP verified successfully",
        token=result.token,
        user=PublicUserSchema.model_validate(result.user),
    )


@router.post("/resend-otp", response_model=MessageResponse, dependencies=[Depends(rate_limit("otp"))])
async def resend_otp(body: ResendOtpRequest, auth: Auth):
    await auth.resend(body.email)
    return MessageResponse(message="New OTP sent to your email address")


@router.get("/google")
async def google_start(oauth: OAuth, settings: AppSettings):
    """Redirect to Google's consent screen."""
    if not oauth.configured:
        raise ProviderNotConfiguredError()

    state = secrets.token_urlsafe(16)
    response = RedirectResponse(oauth.authorization_url(state))
    response.set_cookie(
        key=settings.oauth_state_cookie_name,
        value=state,
        max_age=settings.oauth_state_max_age,
        httponly=True,
        samesite="lax",
        path="/api/auth/google",
    )
    return response


def _signin_redirect(settings: Settings, error: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.frontend_url.rstrip('/')}/signin?error={error}")


@router.get("/google/callback")
async def google_callback(
    request: Request,
    auth: Auth,
    oauth: OAuth,
    settings: AppSettings,
    code: str | None = None,
    state: str | None = None,
):
    """Finish Google sign-in and hand the session token to the front end."""
    if not oauth.configured:
        return _signin_redirect(settings, "google_not_configured")

    expected_state = request.cookies.get(settings.oauth_state_cookie_name)
    if not code or not state or not expected_state or not hmac.compare_digest(state, expected_state):
        return _signin_redirect(settings, "google_auth_failed")

    try:
        identity = await oauth.fetch_identity(code)
        result = await auth.oauth_login(identity)
    except AppError as exc:
        logger.warning("Google callback failed: %s", exc)
        return _signin_redirect(settings, "auth_failed")

    response = RedirectResponse(f"{settings.frontend_url.rstrip('/')}/dashboard?token={result.token}")
    response.delete_cookie(settings.oauth_state_cookie_name, path="/api/auth/google")
    return response
