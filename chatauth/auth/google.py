"""Google OAuth2 client.

Implements the authorization-code flow against Google's endpoints:
build the consent URL, exchange the returned code for an access token,
and read the userinfo claims that identify the account.

Follows the same pattern as the rest of the service for upstream calls:
pooled httpx client, retry on transport errors only, and every upstream
failure surfaced as ProviderError.
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx

from chatauth.core.exceptions import ProviderError
from chatauth.core.http import create_http_client
from chatauth.core.retry import with_retry
from chatauth.core.settings import Settings

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
GOOGLE_SCOPES = ("profile", "email")


@dataclass(frozen=True)
class GoogleIdentity:
    """Claims Google attests to for the signed-in account."""

    external_id: str
    email: str
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None


class GoogleOAuthClient:
    """Google OAuth2 authorization-code client.

    Owns one pooled AsyncClient for the application lifetime; call
    aclose() on shutdown.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._http = http_client or create_http_client(
            max_connections=50, max_keepalive_connections=10
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleOAuthClient":
        return cls(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_callback_url,
        )

    def authorization_url(self, state: str) -> str:
        """Build the consent screen URL for the given anti-forgery state."""
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "state": state,
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_identity(self, code: str) -> GoogleIdentity:
        """Complete the flow for an authorization code.

        Raises:
            ProviderError: If Google is unreachable, rejects the code,
                or returns claims without an account id or a verified email
        """
        tokens = await self._request(
            "POST",
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "redirect_uri": self._redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        access_token = tokens.get("access_token")
        if not access_token:
            raise ProviderError("Token response missing access_token")

        claims = await self._request(
            "GET",
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return self._identity_from_claims(claims)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        async def do_request() -> httpx.Response:
            return await self._http.request(method, url, **kwargs)

        try:
            response = await with_retry(
                do_request, attempts=2, exceptions=(httpx.RequestError,)
            )
        except httpx.RequestError as e:
            raise ProviderError("Authentication provider unavailable") from e

        if response.status_code != 200:
            # Google error bodies may echo the code; log only the status.
            logger.warning(
                "Google OAuth error: %s %s -> %s",
                method,
                url,
                response.status_code,
            )
            raise ProviderError(
                f"Authentication provider rejected the request ({response.status_code})"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError() from e
        if not isinstance(data, dict):
            raise ProviderError()
        return data

    @staticmethod
    def _identity_from_claims(claims: dict[str, Any]) -> GoogleIdentity:
        sub = claims.get("sub")
        email = claims.get("email")
        if not sub or not email:
            raise ProviderError("Google account did not share an id and email")
        # Only addresses Google has verified may claim an email.
        if str(claims.get("email_verified")).lower() != "true":
            raise ProviderError("Google account email is not verified")

        return GoogleIdentity(
            external_id=str(sub),
            email=str(email),
            display_name=claims.get("name"),
            first_name=claims.get("given_name"),
            last_name=claims.get("family_name"),
            avatar_url=claims.get("picture"),
        )
