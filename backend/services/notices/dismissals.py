"""Per-user dismissal records kept in user meta."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Protocol, cast, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import settings
from db.errors import is_unique_violation
from models import UserMeta

USER_META_KEY = "_stellarwp_dismissed_notices"
logger = logging.getLogger(__name__)


@runtime_checkable
class DismissalStore(Protocol):
    async def get(self, user_id: str, key: str) -> int | None: ...

    async def set_dismissed(self, user_id: str, key: str) -> bool: ...

    async def all_for_user(self, user_id: str) -> dict[str, int]: ...


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _as_record(meta_value: Any) -> dict[str, int]:
    if not isinstance(meta_value, dict):
        return {}
    record: dict[str, int] = {}
    for key, dismissed_at in meta_value.items():
        try:
            record[str(key)] = int(dismissed_at)
        except (TypeError, ValueError):
            continue
    return record


class UserMetaDismissalStore:
    """Dismissal store backed by a single JSON ``user_meta`` row per user.

    Updates rewrite the whole map, so two concurrent dismissals by the same
    user can lose one of the writes.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        meta_key: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.session = session
        self.meta_key = meta_key or settings.dismissed_notices_meta_key
        self.clock = clock

    async def _load_row(self, user_id: str) -> UserMeta | None:
        result = await self.session.execute(
            select(UserMeta)
            .where(
                _eq(UserMeta.user_id, user_id),
                _eq(UserMeta.meta_key, self.meta_key),
            )
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def all_for_user(self, user_id: str) -> dict[str, int]:
        row = await self._load_row(user_id)
        if row is None:
            return {}
        return _as_record(row.meta_value)

    async def get(self, user_id: str, key: str) -> int | None:
        return (await self.all_for_user(user_id)).get(key)

    async def _write(self, user_id: str, key: str) -> None:
        row = await self._load_row(user_id)
        current = _as_record(row.meta_value if row is not None else None)
        current[key] = int(self.clock())

        if row is None:
            self.session.add(
                UserMeta(user_id=user_id, meta_key=self.meta_key, meta_value=current)
            )
        else:
            row.meta_value = current
        await self.session.commit()

    async def set_dismissed(self, user_id: str, key: str) -> bool:
        try:
            try:
                await self._write(user_id, key)
            except IntegrityError as exc:
                await self.session.rollback()
                if not is_unique_violation(exc):
                    raise
                # Another request created the row first; merge into it.
                await self._write(user_id, key)
        except SQLAlchemyError as write_error:
            await self.session.rollback()
            logger.warning(
                "Failed to persist notice dismissal",
                extra={"user_id": user_id, "notice_key": key},
                exc_info=write_error,
            )
            return False
        return True


async def dismiss_notice_for_user(
    store: DismissalStore,
    notice_key: str,
    user_id: str | None,
) -> bool:
    """Record that ``user_id`` dismissed the notice identified by ``notice_key``."""
    if not user_id:
        return False
    return await store.set_dismissed(user_id, notice_key)
