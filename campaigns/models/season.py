"""SQLModel mapping for campaign seasons."""
# ruff: noqa: UP017

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlmodel import Field, SQLModel

from campaigns.models.profit_sharing import SeasonSnapshot


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class SeasonRecord(SQLModel, table=True):
    """Time-bounded fundraising period within a campaign."""

    __tablename__ = "seasons"
    __table_args__ = (
        sa.Index("ix_seasons_campaign_status", "campaign_id", "status"),
    )

    id: str = Field(
        default_factory=_new_id,
        sa_column=Column(String(length=64), primary_key=True, nullable=False),
    )
    name: str = Field(sa_column=Column(String(length=255), nullable=False))
    campaign_id: str = Field(
        sa_column=Column(
            String(length=64),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    goal: float | None = Field(default=None, sa_column=Column(Float, nullable=True))
    total_raised: float = Field(
        default=0.0, sa_column=Column(Float, nullable=False, server_default="0")
    )
    donation_count: int = Field(
        default=0, sa_column=Column(Integer, nullable=False, server_default="0")
    )
    status: str = Field(
        default="upcoming",
        sa_column=Column(String(length=32), nullable=False, server_default="upcoming"),
    )
    start_date: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    end_date: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    def to_snapshot(self, campaign_name: str | None = None) -> SeasonSnapshot:
        """Project the row onto the read-only view used by the engine."""
        return SeasonSnapshot(
            id=self.id,
            name=self.name,
            campaign_id=self.campaign_id,
            campaign_name=campaign_name,
            goal=self.goal,
            total_raised=self.total_raised or 0.0,
            donation_count=self.donation_count or 0,
            status=self.status,
        )
