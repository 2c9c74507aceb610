"""Admin notice rendering and dismissal endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from api.deps import (
    get_current_user,
    get_db,
    get_dismissal_store,
    get_notice_queue,
    get_notice_service,
    resolve_current_user,
)
from models import User
from services.notices import (
    DismissalResult,
    DismissedNoticeListResponse,
    NoticeListResponse,
    NoticeQueue,
    NoticeService,
    UserMetaDismissalStore,
    handle_dismissal,
    reject_dismissal,
    script_tag,
)
from services.notices.handler import ACTOR_LOOKUP_FAILED_MESSAGE, RATE_LIMITED_MESSAGE
from services.rate_limiter import too_many_requests_response

router = APIRouter(prefix="/notices", tags=["notices"])
logger = logging.getLogger(__name__)

ASSET_BASE = "/assets"
DISMISS_ENDPOINT = "/api/v1/notices/dismiss"


def _ack_response(result: DismissalResult) -> JSONResponse:
    return JSONResponse(result.ack.as_payload(), status_code=result.status_code)


def rate_limited_response(request: Request) -> Response:
    """Answer throttled dismissals with an acknowledgement body."""
    if request.url.path != DISMISS_ENDPOINT:
        return too_many_requests_response(request)
    return _ack_response(
        reject_dismissal(RATE_LIMITED_MESSAGE, status.HTTP_429_TOO_MANY_REQUESTS)
    )


@router.post("/dismiss")
async def dismiss_notice(
    request: Request,
    action: Annotated[str | None, Form()] = None,
    notice: Annotated[str | None, Form()] = None,
    nonce: Annotated[str | None, Form(alias="_wpnonce")] = None,
    session: AsyncSession = Depends(get_db),
    store: UserMetaDismissalStore = Depends(get_dismissal_store),
) -> JSONResponse:
    try:
        current_user = await resolve_current_user(request, session)
    except SQLAlchemyError as lookup_error:
        logger.warning(
            "Could not resolve user for notice dismissal",
            extra={"path": request.url.path},
            exc_info=lookup_error,
        )
        return _ack_response(
            reject_dismissal(
                ACTOR_LOOKUP_FAILED_MESSAGE, status.HTTP_503_SERVICE_UNAVAILABLE
            )
        )

    result = await handle_dismissal(
        {"action": action, "notice": notice, "_wpnonce": nonce},
        user_id=current_user.id if current_user is not None else None,
        store=store,
    )
    return _ack_response(result)


@router.get("", response_model=NoticeListResponse)
async def list_notices(
    queue: NoticeQueue = Depends(get_notice_queue),
    service: NoticeService = Depends(get_notice_service),
    current_user: User = Depends(get_current_user),
) -> NoticeListResponse:
    batch = await queue.render_all(service, current_user.id)
    scripts = [script_tag(ASSET_BASE, DISMISS_ENDPOINT)] if batch.needs_script else []
    return NoticeListResponse(notices=batch.markup, scripts=scripts)


@router.get("/dismissed", response_model=DismissedNoticeListResponse)
async def list_dismissed_notices(
    store: UserMetaDismissalStore = Depends(get_dismissal_store),
    current_user: User = Depends(get_current_user),
) -> DismissedNoticeListResponse:
    dismissed = await store.all_for_user(current_user.id)
    return DismissedNoticeListResponse(dismissed=dismissed)
