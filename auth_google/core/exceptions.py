"""Custom exception hierarchy for auth-google."""

from __future__ import annotations

from typing import Any


class AuthGoogleError(Exception):
    """Base exception for all auth-google errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = context or {}


# ── Construction ─────────────────────────────────────────────────

class ConfigurationError(AuthGoogleError):
    """Middleware configuration is invalid. Raised at construction time only."""


# ── Per-request ──────────────────────────────────────────────────

class MalformedURLError(AuthGoogleError):
    """Request URL could not be reconstructed from the configured host."""


class InvalidStateError(AuthGoogleError):
    """Callback presented a state that is not outstanding."""

    def __init__(self, state: str | None = None) -> None:
        super().__init__("Invalid state", context={"state": state})


class CallbackError(AuthGoogleError):
    """Callback query is missing a required parameter."""


class ProviderError(AuthGoogleError):
    """The provider answered with an explicit OAuth error payload."""

    def __init__(
        self,
        error: str,
        description: str | None = None,
        status: int | None = None,
    ) -> None:
        message = f"{error}: {description}" if description else error
        super().__init__(
            message,
            context={"error": error, "error_description": description, "status": status},
        )
        self.error = error
        self.description = description
        self.status = status
