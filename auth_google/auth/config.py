"""Middleware configuration: validated once, at construction time."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator, model_validator

from auth_google.auth.providers import GOOGLE
from auth_google.core.exceptions import ConfigurationError
from auth_google.core.types import AccessType


class AuthConfig(BaseModel):
    """Immutable credentials and routing for one middleware instance."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    client_id: str | None = None
    client_secret: SecretStr | None = None
    callback_url: str | None = None
    service_path: str | None = "/"
    scopes: tuple[str, ...] = ()
    access_type: AccessType = AccessType.OFFLINE

    @classmethod
    def create(cls, **kwargs: Any) -> AuthConfig:
        """Validate ``kwargs``, raising ConfigurationError with the first problem found."""
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            first = exc.errors()[0]
            message = str(first["msg"]).removeprefix("Value error, ")
            raise ConfigurationError(message, context={"errors": exc.errors()}) from exc

    @field_validator("client_id")
    @classmethod
    def require_client_id(cls, v: str | None) -> str:
        if not v:
            raise ValueError("Must provide a client_id.")
        return v

    @field_validator("client_secret")
    @classmethod
    def require_client_secret(cls, v: SecretStr | None) -> SecretStr:
        if v is None or not v.get_secret_value():
            raise ValueError("Must provide a client_secret.")
        return v

    @field_validator("callback_url")
    @classmethod
    def require_callback_url(cls, v: str | None) -> str:
        if not v:
            raise ValueError("Must provide a callback_url.")
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Not a valid callback_url: {exc}") from exc
        if not url.scheme:
            raise ValueError("Not a valid protocol in the callback_url string.")
        if not url.host:
            raise ValueError("Not a valid host in the callback_url string.")
        if not url.path:
            raise ValueError("Not a valid path in the callback_url string.")
        return v

    @field_validator("service_path")
    @classmethod
    def require_service_path(cls, v: str | None) -> str:
        if not v:
            raise ValueError("Must provide an url path.")
        return v

    @field_validator("scopes", mode="before")
    @classmethod
    def merge_scopes(cls, v: Any) -> tuple[str, ...]:
        # OpenID scopes first, then caller scopes in first-seen order.
        extra = [v] if isinstance(v, str) else list(v or ())
        return tuple(dict.fromkeys([*GOOGLE.scopes, *extra]))

    @model_validator(mode="after")
    def check_paths(self) -> AuthConfig:
        if self.service_path == self.callback_path:
            raise ValueError("Service path cannot be the same as callback path.")
        return self

    # ── Derived routing ──────────────────────────────────────────

    @property
    def parsed_callback_url(self) -> httpx.URL:
        return httpx.URL(self.callback_url or "")

    @property
    def protocol(self) -> str:
        return self.parsed_callback_url.scheme

    @property
    def host(self) -> str:
        url = self.parsed_callback_url
        host = f"[{url.host}]" if ":" in url.host else url.host
        return f"{host}:{url.port}" if url.port else host

    @property
    def callback_path(self) -> str:
        # Percent-escapes are kept, matching how request paths are compared.
        return self.parsed_callback_url.raw_path.decode("ascii").partition("?")[0]

    @property
    def secret(self) -> str:
        return self.client_secret.get_secret_value() if self.client_secret else ""
