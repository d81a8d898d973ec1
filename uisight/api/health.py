"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from uisight import __version__
from uisight.engine.pipeline import register_transforms
from uisight.engine.registry import get_registry
from uisight.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    register_transforms()
    return HealthResponse(
        status="ok",
        version=__version__,
        transforms_registered=get_registry().count,
    )
