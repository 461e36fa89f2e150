"""OAuth building blocks for the Google sign-in middleware."""

from auth_google.auth.client import OAuth2Client, TokenResponse
from auth_google.auth.config import AuthConfig
from auth_google.auth.providers import GOOGLE, OAuthProviderConfig
from auth_google.auth.state import StateRegistry

__all__ = [
    "AuthConfig",
    "GOOGLE",
    "OAuth2Client",
    "OAuthProviderConfig",
    "StateRegistry",
    "TokenResponse",
]
