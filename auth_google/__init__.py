"""Google OAuth 2.0 / OpenID Connect sign-in as a composable request middleware."""

from auth_google.core.exceptions import (
    AuthGoogleError,
    CallbackError,
    ConfigurationError,
    InvalidStateError,
    MalformedURLError,
    ProviderError,
)
from auth_google.core.types import AccessType, AuthFailure, AuthOutcome, AuthResult, AuthSuccess, ErrorKind
from auth_google.middleware import GoogleAuth, GoogleAuthMiddleware, google_auth

__version__ = "0.1.0"

__all__ = [
    "AccessType",
    "AuthFailure",
    "AuthGoogleError",
    "AuthOutcome",
    "AuthResult",
    "AuthSuccess",
    "CallbackError",
    "ConfigurationError",
    "ErrorKind",
    "GoogleAuth",
    "GoogleAuthMiddleware",
    "InvalidStateError",
    "MalformedURLError",
    "ProviderError",
    "google_auth",
]
