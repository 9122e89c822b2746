"""SQLModel mapping for fundraising campaigns."""
# ruff: noqa: UP017

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy import Column, DateTime, String
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class CampaignRecord(SQLModel, table=True):
    """Campaign row; only the name is read by profit sharing."""

    __tablename__ = "campaigns"

    id: str = Field(
        default_factory=_new_id,
        sa_column=Column(String(length=64), primary_key=True, nullable=False),
    )
    name: str = Field(sa_column=Column(String(length=255), nullable=False))
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
