"""Shared FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import decode_token
from db.session import get_session
from models import User
from services import UserCapabilityGate
from services.notices import NoticeQueue, NoticeService, UserMetaDismissalStore

ACCESS_COOKIE = "access_token"


async def get_db() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def _extract_access_token(request: Request) -> str | None:
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token

    scheme, _, value = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


async def resolve_current_user(request: Request, session: AsyncSession) -> User | None:
    """Resolve the signed-in user, or None for anonymous requests.

    Database errors propagate to the caller.
    """
    token = _extract_access_token(request)
    if token is None:
        return None

    try:
        payload = decode_token(token)
    except ValueError:
        return None
    if payload.get("type") != "access":
        return None

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return await session.get(User, subject)


async def get_current_user_optional(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> User | None:
    return await resolve_current_user(request, session)


async def get_current_user(
    user: User | None = Depends(get_current_user_optional),
) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def get_dismissal_store(
    session: AsyncSession = Depends(get_db),
) -> UserMetaDismissalStore:
    return UserMetaDismissalStore(session)


def get_notice_service(
    session: AsyncSession = Depends(get_db),
    store: UserMetaDismissalStore = Depends(get_dismissal_store),
) -> NoticeService:
    return NoticeService(UserCapabilityGate(session), store)


def get_notice_queue(request: Request) -> NoticeQueue:
    return request.app.state.notice_queue
