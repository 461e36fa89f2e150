"""Shared types: configuration enums and the outcome handed to downstream handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from auth_google.auth.client import OAuth2Client


# ── Enums ────────────────────────────────────────────────────────

class AccessType(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class ErrorKind(str, Enum):
    """Why a request ended in a failure outcome."""

    INVALID_URL = "invalid_url"
    LOGIN_FAILED = "login_failed"
    INVALID_STATE = "invalid_state"
    PROVIDER_ERROR = "provider_error"  # provider answered with an error payload
    EXCEPTION = "exception"  # a call raised


# ── Outcome ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class AuthResult:
    """A completed login: consumed state, profile payload, authorized client."""

    provider: str
    state: str
    info: dict[str, Any]
    client: OAuth2Client


@dataclass(frozen=True)
class AuthSuccess:
    result: AuthResult

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class AuthFailure:
    err: BaseException
    provider: str
    kind: ErrorKind = ErrorKind.EXCEPTION

    @property
    def ok(self) -> bool:
        return False


AuthOutcome = Union[AuthSuccess, AuthFailure]
