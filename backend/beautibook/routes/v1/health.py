"""Liveness endpoint."""

from fastapi import APIRouter

from ... import __version__
from ...core.config import settings

router = APIRouter(tags=["health-v1"])


@router.get("")
async def health() -> dict[str, str]:
    return {"status": "healthy", "service": f"{settings.brand_name.lower()}-api", "version": __version__}
