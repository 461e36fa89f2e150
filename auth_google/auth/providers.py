"""OAuth provider configuration for Google."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OAuthProviderConfig:
    """Immutable OAuth provider configuration."""

    name: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: tuple[str, ...]


# OpenID Connect scopes are always requested:
# https://developers.google.com/identity/protocols/OpenIDConnect#discovery
GOOGLE = OAuthProviderConfig(
    name="google",
    authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
    token_url="https://oauth2.googleapis.com/token",
    userinfo_url="https://www.googleapis.com/oauth2/v2/userinfo",
    scopes=("openid", "email", "profile"),
)
