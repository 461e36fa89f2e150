"""auth-google FastAPI application: Google sign-in in front of a small JSON API.

Run with ``uvicorn --factory auth_google.api.main:create_app``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from auth_google import __version__
from auth_google.api.routes.health import router as health_router
from auth_google.api.schemas import AuthErrorResponse, LoginResponse
from auth_google.core.logging import configure_logging, get_logger
from auth_google.core.types import AuthFailure, AuthSuccess
from auth_google.middleware import GoogleAuth, GoogleAuthMiddleware
from config.settings import Settings, get_settings

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup/shutdown lifecycle: close the provider HTTP client on exit."""
    log.info("api_starting", callback_path=app.state.auth.config.callback_path)
    yield
    await app.state.auth.aclose()
    log.info("api_shutdown")


async def oauth_result(request: Request) -> JSONResponse:
    """Render the callback outcome left by the auth middleware."""
    outcome = getattr(request.state, "auth_outcome", None)

    if isinstance(outcome, AuthSuccess):
        result = outcome.result
        body = LoginResponse(provider=result.provider, state=result.state, info=result.info)
        return JSONResponse(body.model_dump(), status_code=status.HTTP_200_OK)

    if isinstance(outcome, AuthFailure):
        body_err = AuthErrorResponse(
            provider=outcome.provider,
            kind=outcome.kind.value,
            error=str(outcome.err),
        )
        return JSONResponse(body_err.model_dump(), status_code=status.HTTP_401_UNAUTHORIZED)

    return JSONResponse(
        {"error": "callback was not handled by the auth middleware"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def create_app(settings: Settings | None = None, auth: GoogleAuth | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, json=settings.log_json)
    auth = auth or GoogleAuth.from_settings(settings)

    app = FastAPI(
        title="auth-google",
        description="Google OAuth 2.0 / OpenID Connect sign-in",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.auth = auth
    app.add_middleware(GoogleAuthMiddleware, auth=auth)

    app.include_router(health_router)
    app.add_api_route(
        auth.config.callback_path,
        oauth_result,
        methods=["GET"],
        include_in_schema=False,
    )

    return app
