"""Ordered collection of notices awaiting a render pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count

from .notice import Notice
from .rendering import NoticeService

DEFAULT_PRIORITY = 10


@dataclass
class NoticeBatch:
    markup: list[str] = field(default_factory=list)
    needs_script: bool = False


class NoticeQueue:
    """Notices registered for display, rendered lowest priority first.

    Notices sharing a priority keep their registration order.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[int, int, Notice]] = []
        self._sequence = count()

    def __len__(self) -> int:
        return len(self._entries)

    def queue(self, notice: Notice, priority: int = DEFAULT_PRIORITY) -> Notice:
        self._entries.append((priority, next(self._sequence), notice))
        return notice

    def clear(self) -> None:
        self._entries.clear()

    def notices(self) -> list[Notice]:
        ordered = sorted(self._entries, key=lambda entry: entry[:2])
        return [notice for _priority, _sequence, notice in ordered]

    async def render_all(self, service: NoticeService, user_id: str | None) -> NoticeBatch:
        batch = NoticeBatch()
        for notice in self.notices():
            rendered = await service.render(notice, user_id)
            if not rendered:
                continue
            batch.markup.append(rendered.markup)
            batch.needs_script = batch.needs_script or rendered.needs_script
        return batch
