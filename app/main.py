"""Notes API - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.errors import AppError, RateLimitedError, TokenError, ValidationError
from app.core.logging import configure_logging
from app.core.security import TokenService
from app.db.session import build_engine, build_sessionmaker, create_tables
from app.routers import auth, notes, user
from app.services.mailer import build_mailer
from app.services.oauth import GoogleOAuthClient
from app.services.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables(app.state.engine)
    yield
    await app.state.engine.dispose()


def _field_name(loc) -> str | None:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return parts[-1] if parts else None


def _validation_message(error: dict) -> str:
    field = _field_name(error.get("loc", ()))
    if error.get("type") == "missing":
        label = (field or "field")
        return f"{label[:1].upper()}{label[1:]} is required"
    message = error.get("msg", "Validation error")
    return message.removeprefix("Value error, ")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    return JSONResponse(
        status_code=400,
        content={"error": _validation_message(first), "field": _field_name(first.get("loc", ()))},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    content = {"error": exc.detail}
    headers = None
    if isinstance(exc, ValidationError) and exc.field:
        content["field"] = exc.field
    if isinstance(exc, TokenError):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, RateLimitedError) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Personal notes with email one-time-code sign-in",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.debug)
    app.state.sessionmaker = build_sessionmaker(app.state.engine)
    app.state.tokens = TokenService.from_settings(settings)
    app.state.mailer = build_mailer(settings)
    app.state.oauth = GoogleOAuthClient(settings)
    app.state.limiter = RateLimiter()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url, *settings.cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(user.router)

    @app.get("/api/health")
    async def health():
        return {"message": "Server is running!"}

    return app


app = create_app()
