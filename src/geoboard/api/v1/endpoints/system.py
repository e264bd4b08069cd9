"""Service metadata endpoints."""

from fastapi import APIRouter

from geoboard.core.settings import settings

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/version")
async def version() -> dict[str, str]:
    """Return the application name and version."""
    return {"name": settings.app_name, "version": settings.app_version}
