"""Tests for middleware configuration validation."""

from __future__ import annotations

from typing import Any

import pytest

from auth_google.auth.config import AuthConfig
from auth_google.core.exceptions import ConfigurationError
from auth_google.core.types import AccessType
from auth_google.middleware import GoogleAuth

VALID: dict[str, Any] = {
    "client_id": "A",
    "client_secret": "B",
    "callback_url": "https://app.test/auth/callback",
    "service_path": "/login",
}


def _config(**overrides: Any) -> AuthConfig:
    return AuthConfig.create(**{**VALID, **overrides})


class TestRequiredFields:
    def test_valid(self) -> None:
        cfg = _config()
        assert cfg.client_id == "A"
        assert cfg.secret == "B"
        assert cfg.access_type is AccessType.OFFLINE

    @pytest.mark.parametrize(
        ("field", "message"),
        [
            ("client_id", "Must provide a client_id."),
            ("client_secret", "Must provide a client_secret."),
            ("callback_url", "Must provide a callback_url."),
            ("service_path", "Must provide an url path."),
        ],
    )
    def test_missing(self, field: str, message: str) -> None:
        kwargs = dict(VALID)
        del kwargs[field]
        if field == "service_path":
            kwargs[field] = ""
        with pytest.raises(ConfigurationError) as exc_info:
            AuthConfig.create(**kwargs)
        assert str(exc_info.value) == message

    @pytest.mark.parametrize("field", ["client_id", "client_secret", "callback_url"])
    def test_empty_string(self, field: str) -> None:
        with pytest.raises(ConfigurationError):
            _config(**{field: ""})

    def test_service_path_defaults_to_root(self) -> None:
        kwargs = dict(VALID)
        del kwargs["service_path"]
        cfg = AuthConfig.create(**kwargs)
        assert cfg.service_path == "/"


class TestCallbackUrl:
    @pytest.mark.parametrize("url", ["app.test/auth/callback", "/auth/callback"])
    def test_no_protocol(self, url: str) -> None:
        with pytest.raises(ConfigurationError, match="callback_url"):
            _config(callback_url=url)

    def test_no_host(self) -> None:
        with pytest.raises(ConfigurationError, match="callback_url"):
            _config(callback_url="file:///auth/callback")

    def test_derived_routing(self) -> None:
        cfg = _config()
        assert cfg.protocol == "https"
        assert cfg.host == "app.test"
        assert cfg.callback_path == "/auth/callback"

    def test_host_keeps_port(self) -> None:
        cfg = _config(callback_url="http://localhost:8000/cb")
        assert cfg.host == "localhost:8000"
        assert cfg.callback_path == "/cb"

    def test_callback_path_keeps_escapes(self) -> None:
        cfg = _config(callback_url="https://app.test/auth%20cb?x=1")
        assert cfg.callback_path == "/auth%20cb"

    def test_service_path_equal_to_callback_path(self) -> None:
        with pytest.raises(ConfigurationError, match="Service path cannot be the same as callback path."):
            _config(service_path="/auth/callback")


class TestScopes:
    def test_openid_scopes_always_present(self) -> None:
        assert _config().scopes == ("openid", "email", "profile")

    def test_caller_scopes_appended_without_duplicates(self) -> None:
        cfg = _config(
            scopes=[
                "https://www.googleapis.com/auth/calendar.readonly",
                "email",
                "https://www.googleapis.com/auth/calendar.readonly",
            ]
        )
        assert cfg.scopes == (
            "openid",
            "email",
            "profile",
            "https://www.googleapis.com/auth/calendar.readonly",
        )

    def test_order_is_deterministic(self) -> None:
        assert _config(scopes=["b", "a"]).scopes == _config(scopes=["b", "a"]).scopes


class TestAccessType:
    def test_online(self) -> None:
        assert _config(access_type="online").access_type is AccessType.ONLINE

    def test_unknown_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            _config(access_type="forever")


class TestMiddlewareConstruction:
    def test_fails_fast(self) -> None:
        with pytest.raises(ConfigurationError):
            GoogleAuth(client_id="A", client_secret="B")

    def test_each_instance_owns_a_registry(self) -> None:
        first = GoogleAuth(client_id="A", client_secret="B", callback_url="https://app.test/cb")
        second = GoogleAuth(client_id="A", client_secret="B", callback_url="https://app.test/cb")
        assert first.registry is not second.registry

    def test_config_is_frozen(self) -> None:
        cfg = _config()
        with pytest.raises(Exception):
            cfg.client_id = "other"  # type: ignore[misc]
