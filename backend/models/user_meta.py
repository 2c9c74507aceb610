"""Per-user attribute storage."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlmodel import Field, SQLModel

MAX_META_KEY_LENGTH = 191


class UserMeta(SQLModel, table=True):
    """A named JSON attribute attached to a user."""

    __tablename__ = "user_meta"
    __table_args__ = (
        UniqueConstraint("user_id", "meta_key", name="ux_user_meta_user_key"),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    meta_key: str = Field(
        sa_column=Column(String(MAX_META_KEY_LENGTH), nullable=False)
    )
    meta_value: Any = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )
    updated_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
    )
