"""Pydantic V2 response schemas for the auth-google API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str


class LoginResponse(BaseModel):
    """Successful callback: the consumed state and the Google profile."""

    provider: str
    state: str
    info: dict[str, Any] = Field(default_factory=dict)


class AuthErrorResponse(BaseModel):
    provider: str
    kind: str
    error: str
