"""FastAPI application factory."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from api.v1 import router as api_router
from api.v1.notices import rate_limited_response
from core import settings
from services import RateLimitMiddleware, get_rate_limiter
from services.notices import NoticeQueue
from services.notices.assets import ASSETS_DIR

ASSET_MOUNT = "/assets"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(notice_queue: NoticeQueue | None = None) -> FastAPI:
    """Build the application around the queue of notices it will render."""
    configure_logging()

    application = FastAPI(title="Admin Notices")
    application.state.notice_queue = (
        notice_queue if notice_queue is not None else NoticeQueue()
    )

    application.add_middleware(
        RateLimitMiddleware,
        limiter_factory=get_rate_limiter,
        exempt_prefixes=(ASSET_MOUNT,),
        limited_response=rate_limited_response,
    )
    application.include_router(api_router)
    application.mount(ASSET_MOUNT, StaticFiles(directory=ASSETS_DIR), name="assets")
    return application


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(
        "app:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
