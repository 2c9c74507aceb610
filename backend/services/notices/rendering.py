"""Render decisions and markup for admin notices."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape
from typing import Callable

from core import create_nonce
from services.capabilities import AuthorizationGate

from .dismissals import DismissalStore, dismiss_notice_for_user
from .notice import Notice

NONCE_DISMISS_NOTICE = "stellarwp-admin-notice-dismiss"
NonceFactory = Callable[[str, str | None], str]
MessageFormatter = Callable[[str], str]

_BLOCK_TAG_PATTERN = re.compile(
    r"^<(?:p|div|ul|ol|li|dl|h[1-6]|table|blockquote|pre|form|section|hr|figure)\b",
    re.IGNORECASE,
)
_PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\s*\n")


@dataclass(frozen=True)
class RenderedNotice:
    """Markup for one notice; empty markup means "do not display"."""

    markup: str = ""
    needs_script: bool = False

    def __bool__(self) -> bool:
        return bool(self.markup)


EMPTY_RENDER = RenderedNotice()


def format_message(message: str) -> str:
    """Wrap plain-text blocks in paragraphs, leaving block-level markup alone."""
    normalized = message.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not normalized:
        return ""

    blocks: list[str] = []
    for block in _PARAGRAPH_BREAK_PATTERN.split(normalized):
        block = block.strip()
        if not block:
            continue
        if _BLOCK_TAG_PATTERN.match(block):
            blocks.append(block)
        else:
            blocks.append("<p>" + block.replace("\n", "<br />\n") + "</p>")
    return "\n".join(blocks)


class NoticeService:
    """Decide whether a notice is shown to a user and build its markup.

    Dismissal state is read from the store on every call; nothing is cached
    between renders.
    """

    def __init__(
        self,
        gate: AuthorizationGate,
        store: DismissalStore,
        *,
        nonce_factory: NonceFactory = create_nonce,
        formatter: MessageFormatter = format_message,
    ) -> None:
        self.gate = gate
        self.store = store
        self.nonce_factory = nonce_factory
        self.formatter = formatter

    async def dismissed_by_user_at(
        self,
        notice: Notice,
        user_id: str | None,
    ) -> datetime | None:
        """When ``user_id`` dismissed ``notice``, or None if they have not."""
        notice_key = notice.dismissible_key
        if not notice.dismissible or not notice_key or not user_id:
            return None

        dismissed_at = await self.store.get(user_id, notice_key)
        if dismissed_at is None:
            return None
        return datetime.fromtimestamp(dismissed_at, tz=timezone.utc)

    async def dismissed_by_user(self, notice: Notice, user_id: str | None) -> bool:
        return await self.dismissed_by_user_at(notice, user_id) is not None

    async def dismiss_for_user(self, notice: Notice, user_id: str | None) -> bool:
        notice_key = notice.dismissible_key
        if not notice.dismissible or not notice_key:
            return False
        return await dismiss_notice_for_user(self.store, notice_key, user_id)

    async def render(self, notice: Notice, user_id: str | None) -> RenderedNotice:
        if notice.capability and not await self.gate.has_capability(
            user_id, notice.capability
        ):
            return EMPTY_RENDER

        if notice.dismissible and await self.dismissed_by_user(notice, user_id):
            return EMPTY_RENDER

        classes = ["notice", f"notice-{notice.severity.value}"]
        if notice.alt:
            classes.append("notice-alt")
        if notice.inline:
            classes.append("inline")

        data_attributes = ""
        needs_script = False
        if notice.dismissible:
            classes.append("is-dismissible")

            if notice.dismissible_key:
                nonce = self.nonce_factory(NONCE_DISMISS_NOTICE, user_id)
                data_attributes = (
                    f' data-id="{escape(notice.dismissible_key)}"'
                    f' data-nonce="{escape(nonce)}"'
                )
                needs_script = True

        markup = '<div class="{classes}"{data}>{body}</div>'.format(
            classes=escape(" ".join(classes)),
            data=data_attributes,
            body=self.formatter(notice.message),
        )
        return RenderedNotice(markup=markup, needs_script=needs_script)
