"""User domain model."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String, func
from sqlmodel import Field, SQLModel

DEFAULT_ROLE = "subscriber"


class User(SQLModel, table=True):
    """An actor of the administrative interface."""

    __tablename__ = "users"

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        sa_column=Column(String(36), primary_key=True),
    )
    username: str = Field(
        sa_column=Column(String(60), unique=True, nullable=False, index=True)
    )
    role: str = Field(
        default=DEFAULT_ROLE,
        sa_column=Column(String(40), nullable=False, server_default=DEFAULT_ROLE),
    )
    # Grants on top of the role's defaults.
    capabilities: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
    )
