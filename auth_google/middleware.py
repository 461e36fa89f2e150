"""Google sign-in middleware: login redirect and callback handling.

``GoogleAuth`` watches two paths. A request to the service path is answered
with a 307 redirect to Google's consent screen carrying a fresh anti-forgery
state. A request to the callback path has its state checked against the
outstanding ones, consumes it, exchanges the code for tokens and fetches the
user's profile. Every other request passes through untouched.

The wrapped handler always learns how the callback went through the
``outcome`` keyword, an ``AuthSuccess`` or an ``AuthFailure``. Failures are
never raised out of the middleware.

Two ways to mount it::

    auth = GoogleAuth(client_id=..., client_secret=..., callback_url=..., path="/login")

    @auth
    async def handler(request, outcome=None):
        ...

    app.add_middleware(GoogleAuthMiddleware, auth=auth)  # outcome in request.state.auth_outcome
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

import httpx
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from auth_google.auth.client import OAuth2Client
from auth_google.auth.config import AuthConfig
from auth_google.auth.providers import GOOGLE
from auth_google.auth.state import StateRegistry
from auth_google.core.exceptions import (
    CallbackError,
    InvalidStateError,
    MalformedURLError,
    ProviderError,
)
from auth_google.core.logging import get_logger
from auth_google.core.types import (
    AccessType,
    AuthFailure,
    AuthOutcome,
    AuthResult,
    AuthSuccess,
    ErrorKind,
)

if TYPE_CHECKING:
    from config.settings import Settings

log = get_logger(__name__)

Handler = Callable[..., Awaitable[Any]]


class GoogleAuth:
    """Authorization-code flow for Google, bound to one configuration."""

    provider = GOOGLE.name

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        callback_url: str | None = None,
        path: str | None = "/",
        scopes: list[str] | tuple[str, ...] = (),
        access_type: AccessType | str = AccessType.OFFLINE,
        *,
        registry: StateRegistry | None = None,
        http_client: httpx.AsyncClient | None = None,
        auth_params: Mapping[str, str | bool | None] | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.config = AuthConfig.create(
            client_id=client_id,
            client_secret=client_secret,
            callback_url=callback_url,
            service_path=path,
            scopes=scopes,
            access_type=access_type,
        )
        self.registry = registry if registry is not None else StateRegistry()
        self.client = OAuth2Client(
            client_id=self.config.client_id or "",
            client_secret=self.config.secret,
            redirect_uri=self.config.callback_url or "",
            http=http_client,
            timeout=timeout,
        )
        self.auth_params = dict(auth_params or {})

    @classmethod
    def from_settings(cls, settings: Settings) -> GoogleAuth:
        return cls(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret.get_secret_value(),
            callback_url=settings.google_callback_url,
            path=settings.auth_service_path,
            scopes=settings.auth_scopes,
            access_type=settings.auth_access_type,
            registry=StateRegistry(
                ttl=settings.auth_state_ttl,
                max_size=settings.auth_state_max_size,
            ),
            auth_params={
                "prompt": settings.auth_prompt,
                "hd": settings.auth_hosted_domain,
            },
            timeout=settings.http_timeout,
        )

    def __call__(self, handler: Handler) -> Handler:
        """Wrap ``handler`` so login and callback requests are intercepted."""

        @functools.wraps(handler)
        async def endpoint(request: Request, *args: Any, **kwargs: Any) -> Any:
            return await self.dispatch(handler, request, *args, **kwargs)

        return endpoint

    async def aclose(self) -> None:
        await self.client.aclose()
        self.registry.clear()

    # ── Dispatch ─────────────────────────────────────────────────

    async def dispatch(self, handler: Handler, request: Request, *args: Any, **kwargs: Any) -> Any:
        try:
            url, path = self._request_url(request)
        except (MalformedURLError, httpx.InvalidURL, ValueError) as exc:
            log.warning("oauth_request_url_invalid", error=str(exc))
            outcome: AuthOutcome = AuthFailure(exc, self.provider, ErrorKind.INVALID_URL)
            return await self._forward(handler, request, outcome, args, kwargs)

        # Routes match the path as sent, percent-escapes included.
        if path == self.config.service_path:
            pinned = kwargs.get("state") or getattr(request.state, "oauth_state", None)
            result = self._login(pinned)
            if isinstance(result, Response):
                return result
            return await self._forward(handler, request, result, args, kwargs)

        if path == self.config.callback_path:
            outcome = await self._callback(url)
            return await self._forward(handler, request, outcome, args, kwargs)

        return await handler(request, *args, **kwargs)

    def _request_url(self, request: Request) -> tuple[httpx.URL, str]:
        """Rebuild the full request URL and return it with the undecoded path."""
        raw_path: bytes = request.scope.get("raw_path") or request.url.path.encode()
        path = raw_path.decode("latin-1").partition("?")[0]
        if not path.startswith("/"):
            raise MalformedURLError("Request target is not an absolute path", context={"target": path})
        target = path
        query: bytes = request.scope.get("query_string", b"")
        if query:
            target = f"{path}?{query.decode('latin-1')}"
        return httpx.URL(f"{self.config.protocol}://{self.config.host}{target}"), path

    async def _forward(
        self,
        handler: Handler,
        request: Request,
        outcome: AuthOutcome,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        return await handler(request, *args, **{**kwargs, "outcome": outcome})

    # ── Login ────────────────────────────────────────────────────

    def _login(self, pinned: str | None) -> Response | AuthFailure:
        try:
            state = self.registry.issue(pinned or None)
            location = self.client.generate_auth_url(
                access_type=self.config.access_type.value,
                scope=self.config.scopes,
                state=state,
                **self.auth_params,
            )
        except Exception as exc:
            log.exception("oauth_login_failed")
            return AuthFailure(exc, self.provider, ErrorKind.LOGIN_FAILED)

        log.info("oauth_login_redirect", pinned=bool(pinned), outstanding=len(self.registry))
        return RedirectResponse(location, status_code=307)

    # ── Callback ─────────────────────────────────────────────────

    async def _callback(self, url: httpx.URL) -> AuthOutcome:
        try:
            params = url.params
            state = params.get("state")

            if not self.registry.contains(state) or not self.registry.consume(state):
                log.warning("oauth_state_invalid")
                return AuthFailure(InvalidStateError(state), self.provider, ErrorKind.INVALID_STATE)

            # RFC 6749 §4.1.2.1: the user denied consent or the request was rejected.
            if params.get("error"):
                err = ProviderError(params["error"], description=params.get("error_description"))
                log.info("oauth_authorization_denied", error=err.error)
                return AuthFailure(err, self.provider, ErrorKind.PROVIDER_ERROR)

            code = params.get("code")
            if not code:
                raise CallbackError("Missing code", context={"state": state})

            token = await self.client.get_token(code)
            if token.error is not None or token.tokens is None:
                err = token.error or ProviderError("invalid_token_response")
                log.info("oauth_token_exchange_failed", error=err.error, status=err.status)
                return AuthFailure(err, self.provider, ErrorKind.PROVIDER_ERROR)

            client = self.client.with_credentials(token.tokens)
            info = await client.userinfo()
        except Exception as exc:
            log.warning("oauth_callback_failed", error_type=type(exc).__name__, error=str(exc))
            return AuthFailure(exc, self.provider, ErrorKind.EXCEPTION)

        log.info("oauth_login_success", provider=self.provider)
        return AuthSuccess(AuthResult(provider=self.provider, state=state, info=info, client=client))


def google_auth(**options: Any) -> GoogleAuth:
    """Build a ``GoogleAuth``; the result decorates downstream handlers."""
    return GoogleAuth(**options)


class GoogleAuthMiddleware:
    """ASGI middleware form of ``GoogleAuth``.

    Login requests are answered with the redirect. Callback requests reach the
    wrapped app with the outcome stored in ``request.state.auth_outcome``.
    """

    def __init__(self, app: ASGIApp, auth: GoogleAuth) -> None:
        self.app = app
        self.auth = auth

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)

        async def downstream(request: Request, outcome: AuthOutcome | None = None) -> None:
            if outcome is not None:
                request.state.auth_outcome = outcome
            await self.app(scope, receive, send)

        response = await self.auth.dispatch(downstream, request)
        if isinstance(response, Response):
            await response(scope, receive, send)
