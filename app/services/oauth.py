"""Google sign-in: consent URL, code exchange and the resulting identity assertion."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from app.core.config import Settings
from app.core.errors import ProviderNotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"


@dataclass(frozen=True)
class OAuthIdentity:
    """What the provider vouches for after a successful sign-in."""

    provider_id: str
    email: str
    name: str
    email_verified: bool = True


def _json_object(response: httpx.Response) -> dict:
    body = response.json()
    if not isinstance(body, dict):
        raise ValueError(f"expected a JSON object, got {type(body).__name__}")
    return body


class GoogleOAuthClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None, timeout: float = 10.0):
        self.settings = settings
        self._transport = transport
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return self.settings.google_configured

    def _require_configured(self) -> None:
        if not self.configured:
            raise ProviderNotConfiguredError("Google client id/secret missing")

    def authorization_url(self, state: str) -> str:
        self._require_configured()
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }
        return str(httpx.URL(GOOGLE_AUTH_URL, params=params))

    async def fetch_identity(self, code: str) -> OAuthIdentity:
        """Exchange an authorization code for the signed-in user's identity."""
        self._require_configured()
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                token_res = await client.post(
                    GOOGLE_TOKEN_URL,
                    data={
                        "client_id": self.settings.google_client_id,
                        "client_secret": self.settings.google_client_secret,
                        "code": code,
                        "grant_type": "authorization_code",
                        "redirect_uri": self.settings.google_redirect_uri,
                    },
                    headers={"Accept": "application/json"},
                )
                token_res.raise_for_status()
                token_body = _json_object(token_res)
                access_token = token_body.get("access_token")
                if not access_token:
                    raise UpstreamError("Google returned no access token")

                info_res = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                info_res.raise_for_status()
                info = _json_object(info_res)
        except httpx.HTTPError as exc:
            logger.warning("Google OAuth request failed: %s", exc)
            raise UpstreamError(f"Google request failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("Google OAuth returned a non-JSON body: %s", exc)
            raise UpstreamError("Google returned an unreadable response") from exc

        provider_id = info.get("sub")
        email = info.get("email")
        if not provider_id or not email:
            raise UpstreamError("Google profile is missing id or email")

        return OAuthIdentity(
            provider_id=str(provider_id),
            email=email,
            name=info.get("name") or "",
            email_verified=bool(info.get("email_verified", False)),
        )
