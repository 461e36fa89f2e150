"""Google OAuth 2.0 client built on httpx."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict

from auth_google.auth.providers import GOOGLE, OAuthProviderConfig
from auth_google.core.exceptions import AuthGoogleError, ProviderError
from auth_google.core.logging import get_logger

log = get_logger(__name__)


class TokenSet(BaseModel):
    """Token endpoint response. Unknown provider fields are kept."""

    model_config = ConfigDict(extra="allow", frozen=True)

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    scope: str | None = None


@dataclass(frozen=True)
class TokenResponse:
    """Result of a code exchange: either ``tokens`` or an explicit ``error``."""

    tokens: TokenSet | None = None
    error: ProviderError | None = None


class OAuth2Client:
    """Thin OAuth 2.0 client over ``httpx.AsyncClient``.

    One unauthorized client is shared by a middleware instance. Every
    completed login gets its own authorized copy via ``with_credentials``,
    which reuses the same connection pool.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        provider: OAuthProviderConfig = GOOGLE,
        http: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
        credentials: TokenSet | None = None,
    ) -> None:
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.provider = provider
        self._client_secret = client_secret
        self._owns_http = http is None
        self._http = http if http is not None else httpx.AsyncClient(timeout=timeout)
        self._credentials = credentials

    @property
    def credentials(self) -> TokenSet | None:
        return self._credentials

    # ── Authorization request ────────────────────────────────────

    def generate_auth_url(
        self,
        *,
        scope: tuple[str, ...] | list[str],
        state: str,
        access_type: str = "offline",
        **extra: str | bool | None,
    ) -> str:
        """Build the consent-screen URL for the authorization-code flow."""
        params: dict[str, str] = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(scope),
            "access_type": access_type,
            "state": state,
        }
        for key, value in extra.items():
            if value is None:
                continue
            params[key] = str(value).lower() if isinstance(value, bool) else str(value)
        return f"{self.provider.authorize_url}?{urlencode(params)}"

    # ── Token exchange ───────────────────────────────────────────

    async def get_token(self, code: str) -> TokenResponse:
        """Exchange an authorization code for tokens.

        An OAuth error payload from the provider is returned as
        ``TokenResponse.error``. Transport failures and non-JSON error
        responses raise.
        """
        resp = await self._http.post(
            self.provider.token_url,
            data={
                "code": code,
                "client_id": self.client_id,
                "client_secret": self._client_secret,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
            headers={"Accept": "application/json"},
        )

        try:
            body: Any = resp.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            log.info("oauth_token_error", status=resp.status_code, error=body["error"])
            return TokenResponse(
                error=ProviderError(
                    str(body["error"]),
                    description=body.get("error_description"),
                    status=resp.status_code,
                )
            )

        resp.raise_for_status()
        if not isinstance(body, dict):
            raise AuthGoogleError(
                "Token endpoint returned a non-JSON body",
                context={"status": resp.status_code},
            )
        return TokenResponse(tokens=TokenSet.model_validate(body))

    # ── Credentials ──────────────────────────────────────────────

    def with_credentials(self, tokens: TokenSet) -> OAuth2Client:
        """Return an authorized copy sharing this client's HTTP transport."""
        return OAuth2Client(
            client_id=self.client_id,
            client_secret=self._client_secret,
            redirect_uri=self.redirect_uri,
            provider=self.provider,
            http=self._http,
            credentials=tokens,
        )

    # ── Authorized requests ──────────────────────────────────────

    async def request(self, url: str, method: str = "GET", **kwargs: Any) -> httpx.Response:
        """Send an authorized request. Non-2xx responses raise ``httpx.HTTPStatusError``."""
        if self._credentials is None:
            raise AuthGoogleError("No access token is set on this client", context={"url": url})

        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"{self._credentials.token_type} {self._credentials.access_token}"
        headers.setdefault("Accept", "application/json")

        resp = await self._http.request(method, url, headers=headers, **kwargs)
        resp.raise_for_status()
        return resp

    async def userinfo(self) -> dict[str, Any]:
        resp = await self.request(self.provider.userinfo_url)
        data: dict[str, Any] = resp.json()
        return data

    # ── Lifecycle ────────────────────────────────────────────────

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
