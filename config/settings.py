"""auth-google settings: loaded from environment variables via .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """All configuration flows through this class. Never read env vars directly."""

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Environment ──────────────────────────────────────────────
    auth_env: Literal["dev", "prod"] = "dev"

    # ── Google OAuth client ──────────────────────────────────────
    google_client_id: str = ""
    google_client_secret: SecretStr = SecretStr("")
    google_callback_url: str = "http://localhost:8000/auth/callback"

    # ── Middleware ───────────────────────────────────────────────
    auth_service_path: str = "/login"
    auth_scopes: list[str] = []
    auth_access_type: Literal["online", "offline"] = "offline"
    auth_prompt: str | None = None
    auth_hosted_domain: str | None = None
    auth_state_ttl: float | None = None  # seconds; None keeps states until their callback
    auth_state_max_size: int | None = None

    # ── HTTP ─────────────────────────────────────────────────────
    http_timeout: float = 15.0

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = False

    @model_validator(mode="after")
    def _check_prod_callback(self) -> "Settings":
        """Refuse a plain-http callback URL in production."""
        if self.auth_env == "prod" and not self.google_callback_url.startswith("https://"):
            msg = (
                "GOOGLE_CALLBACK_URL must use https in production; "
                "Google rejects plain-http redirect URIs outside localhost."
            )
            raise ValueError(msg)
        return self


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Singleton settings loader. Reads .env once and reuses it."""
    global _settings_instance  # noqa: PLW0603
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
