"""Version 1 API routers."""

from fastapi import APIRouter

from . import notices

API_PREFIX = "/api/v1"

router = APIRouter(prefix=API_PREFIX)
router.include_router(notices.router)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


__all__ = ["API_PREFIX", "router"]
