"""Health check endpoint: passes through the auth middleware untouched."""

from __future__ import annotations

from fastapi import APIRouter, Request

from auth_google import __version__
from auth_google.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    settings = request.app.state.settings
    return HealthResponse(
        status="ok",
        version=__version__,
        environment=settings.auth_env,
    )
