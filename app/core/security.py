"""Password hashing and signed session tokens (stateless JWT bearer auth)."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.clock import utcnow
from app.core.config import Settings
from app.core.errors import InvalidTokenError, TokenExpiredError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_TYPE = "access"


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


class TokenService:
    """Issues and validates HS256 tokens carrying a user id in ``sub``.

    Tokens are self-contained: there is no server-side revocation list, so
    logging out means the client discards its token.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24 * 7,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = timedelta(minutes=expire_minutes)
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        )

    def issue(self, user_id: str) -> str:
        issued_at = self._clock()
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._ttl,
            "type": TOKEN_TYPE,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """Return the user id in ``token``.

        Raises ``TokenExpiredError`` past ``exp`` and ``InvalidTokenError`` for
        anything else wrong with the token.
        """
        if not token:
            raise InvalidTokenError("empty token")
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("token expired") from exc
        except JWTError as exc:
            raise InvalidTokenError(f"token rejected: {exc}") from exc

        if claims.get("type") != TOKEN_TYPE:
            raise InvalidTokenError("unexpected token type")
        subject = claims.get("sub")
        if not subject:
            raise InvalidTokenError("token has no subject")
        return subject
