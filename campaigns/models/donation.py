"""SQLModel mapping for donations."""
# ruff: noqa: UP017

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy import Column, DateTime, Float, String
from sqlmodel import Field, SQLModel

COMPLETED_STATUS = "completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class DonationRecord(SQLModel, table=True):
    """Single donation; status is one of pending/completed/failed/refunded/cancelled."""

    __tablename__ = "donations"
    __table_args__ = (
        sa.Index("ix_donations_season_status", "season_id", "status"),
        sa.Index("ix_donations_donor_id", "donor_id"),
    )

    id: str = Field(
        default_factory=_new_id,
        sa_column=Column(String(length=64), primary_key=True, nullable=False),
    )
    campaign_id: str = Field(
        sa_column=Column(
            String(length=64),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    donor_id: str = Field(
        sa_column=Column(
            String(length=64),
            sa.ForeignKey("donors.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    season_id: str | None = Field(
        default=None,
        sa_column=Column(
            String(length=64),
            sa.ForeignKey("seasons.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    amount: float = Field(sa_column=Column(Float, nullable=False))
    currency: str = Field(
        default="USD", sa_column=Column(String(length=8), nullable=False, server_default="USD")
    )
    status: str = Field(
        default="pending",
        sa_column=Column(String(length=32), nullable=False, server_default="pending"),
    )
    donation_date: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
