"""SQLModel mapping for donors."""
# ruff: noqa: UP017

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy import Boolean, Column, DateTime, String
from sqlmodel import Field, SQLModel

from campaigns.models.profit_sharing import DonorProfile


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class DonorRecord(SQLModel, table=True):
    __tablename__ = "donors"

    id: str = Field(
        default_factory=_new_id,
        sa_column=Column(String(length=64), primary_key=True, nullable=False),
    )
    first_name: str = Field(sa_column=Column(String(length=100), nullable=False))
    last_name: str = Field(sa_column=Column(String(length=100), nullable=False))
    email: str = Field(sa_column=Column(String(length=255), nullable=False, unique=True))
    donor_type: str = Field(
        default="individual",
        sa_column=Column(String(length=32), nullable=False, server_default="individual"),
    )
    is_active: bool = Field(
        default=True, sa_column=Column(Boolean, nullable=False, server_default=sa.true())
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    def to_profile(self) -> DonorProfile:
        return DonorProfile(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            donor_type=self.donor_type,
            is_active=self.is_active,
        )
