"""Notice API payload schemas."""

from __future__ import annotations

from pydantic import BaseModel


class DismissalAck(BaseModel):
    success: bool
    data: str | None = None

    def as_payload(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)


class NoticeListResponse(BaseModel):
    notices: list[str]
    scripts: list[str]


class DismissedNoticeListResponse(BaseModel):
    dismissed: dict[str, int]
