"""FastAPI dependencies: services wired from the app's settings, bearer auth, rate limits."""
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import InvalidTokenError, MissingTokenError
from app.core.security import TokenService
from app.db.session import get_db
from app.models.user import User
from app.repositories.note import NoteRepository
from app.repositories.user import SqlAlchemyUserStore
from app.services.auth import AuthService
from app.services.mailer import Mailer
from app.services.notes import NoteService
from app.services.oauth import GoogleOAuthClient
from app.services.otp import OtpService

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_oauth_client(request: Request) -> GoogleOAuthClient:
    return request.app.state.oauth


def get_user_store(db: Annotated[AsyncSession, Depends(get_db)]) -> SqlAlchemyUserStore:
    return SqlAlchemyUserStore(db)


def get_auth_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
    store: Annotated[SqlAlchemyUserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> AuthService:
    otp = OtpService(store, ttl_minutes=settings.otp_ttl_minutes)
    return AuthService(store, otp, tokens, mailer)


def get_note_service(db: Annotated[AsyncSession, Depends(get_db)]) -> NoteService:
    return NoteService(NoteRepository(db))


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    store: Annotated[SqlAlchemyUserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> User:
    """Resolve the bearer token to a user; every failure is a 401."""
    if credentials is None or not credentials.credentials:
        raise MissingTokenError("no bearer token")

    user_id = tokens.verify(credentials.credentials)
    user = await store.find_by_id(user_id)
    if user is None:
        raise InvalidTokenError("token subject no longer exists")
    return user


def rate_limit(scope: str):
    """Dependency enforcing the ``<scope>_rate_limit`` setting per client address."""

    def dependency(request: Request) -> None:
        settings: Settings = request.app.state.settings
        client = request.client.host if request.client else "unknown"
        request.app.state.limiter.hit(scope, client, getattr(settings, f"{scope}_rate_limit"))

    return dependency


CurrentUser = Annotated[User, Depends(get_current_user)]
