"""Read-only season, donation and donor stores consumed by profit sharing."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Protocol

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from campaigns.config import settings
from campaigns.core.database import build_engine
from campaigns.models.campaign import CampaignRecord
from campaigns.models.donation import COMPLETED_STATUS, DonationRecord
from campaigns.models.donor import DonorRecord
from campaigns.models.profit_sharing import DonorDonationStats, DonorProfile, SeasonSnapshot
from campaigns.models.season import SeasonRecord
from campaigns.services.profit_sharing.errors import StoreError

logger = logging.getLogger(__name__)

DEFAULT_SEASON_STATUSES: tuple[str, ...] = ("active", "completed")


class SeasonStore(Protocol):
    """Season lookups with the parent campaign name populated."""

    def get_season(self, season_id: str) -> SeasonSnapshot | None:
        ...

    def list_campaign_seasons(
        self,
        campaign_id: str,
        statuses: Sequence[str] = DEFAULT_SEASON_STATUSES,
    ) -> list[SeasonSnapshot]:
        ...


class DonationStore(Protocol):
    """Per-donor aggregates over a season's completed donations."""

    def aggregate_by_donor(
        self, season_id: str, *, min_donations: int = 0
    ) -> list[DonorDonationStats]:
        ...


class DonorStore(Protocol):
    def get_profiles(self, donor_ids: Sequence[str]) -> dict[str, DonorProfile]:
        ...


@dataclass(frozen=True)
class ProfitSharingStores:
    """Bundle of the three collaborators the engine reads from."""

    seasons: SeasonStore
    donations: DonationStore
    donors: DonorStore


# ---------------------------------------------------------------------------
# In-memory backends
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DonationEntry:
    """Minimal donation row held by the in-memory donation store."""

    donor_id: str
    season_id: str | None
    amount: float
    status: str = COMPLETED_STATUS
    donation_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemorySeasonStore(SeasonStore):
    """Thread-safe season store used for local runs and tests."""

    def __init__(self, seasons: Iterable[SeasonSnapshot] = ()) -> None:
        self._seasons: dict[str, SeasonSnapshot] = {}
        self._lock = Lock()
        for season in seasons:
            self.add(season)

    def add(self, season: SeasonSnapshot) -> SeasonSnapshot:
        with self._lock:
            self._seasons[season.id] = season
        return season

    def get_season(self, season_id: str) -> SeasonSnapshot | None:
        with self._lock:
            return self._seasons.get(season_id)

    def list_campaign_seasons(
        self,
        campaign_id: str,
        statuses: Sequence[str] = DEFAULT_SEASON_STATUSES,
    ) -> list[SeasonSnapshot]:
        with self._lock:
            return [
                season
                for season in self._seasons.values()
                if season.campaign_id == campaign_id and season.status in statuses
            ]


class InMemoryDonationStore(DonationStore):
    def __init__(self, donations: Iterable[DonationEntry] = ()) -> None:
        self._donations: list[DonationEntry] = list(donations)
        self._lock = Lock()

    def add(self, donation: DonationEntry) -> DonationEntry:
        with self._lock:
            self._donations.append(donation)
        return donation

    def aggregate_by_donor(
        self, season_id: str, *, min_donations: int = 0
    ) -> list[DonorDonationStats]:
        with self._lock:
            completed = [
                donation
                for donation in self._donations
                if donation.season_id == season_id and donation.status == COMPLETED_STATUS
            ]

        grouped: dict[str, list[DonationEntry]] = {}
        for donation in completed:
            grouped.setdefault(donation.donor_id, []).append(donation)

        stats: list[DonorDonationStats] = []
        for donor_id, entries in grouped.items():
            if len(entries) < min_donations:
                continue
            dates = [entry.donation_date for entry in entries]
            stats.append(
                DonorDonationStats(
                    donor_id=donor_id,
                    donation_count=len(entries),
                    total_contributed=sum(entry.amount for entry in entries),
                    first_donation=min(dates),
                    last_donation=max(dates),
                )
            )
        return stats


class InMemoryDonorStore(DonorStore):
    def __init__(self, profiles: Iterable[DonorProfile] = ()) -> None:
        self._profiles: dict[str, DonorProfile] = {}
        self._lock = Lock()
        for profile in profiles:
            self.add(profile)

    def add(self, profile: DonorProfile) -> DonorProfile:
        with self._lock:
            self._profiles[profile.id] = profile
        return profile

    def get_profiles(self, donor_ids: Sequence[str]) -> dict[str, DonorProfile]:
        with self._lock:
            return {
                donor_id: self._profiles[donor_id]
                for donor_id in donor_ids
                if donor_id in self._profiles
            }


# ---------------------------------------------------------------------------
# SQL backends
# ---------------------------------------------------------------------------


class _SqlStore:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with Session(self._engine) as session:
            yield session


class SqlSeasonStore(_SqlStore, SeasonStore):
    """SQLModel-backed season lookups joined with the campaign name."""

    def get_season(self, season_id: str) -> SeasonSnapshot | None:
        try:
            with self._session() as session:
                statement = (
                    select(SeasonRecord, CampaignRecord.name)
                    .join(CampaignRecord, CampaignRecord.id == SeasonRecord.campaign_id, isouter=True)
                    .where(SeasonRecord.id == season_id)
                )
                row = session.exec(statement).first()
                if row is None:
                    return None
                record, campaign_name = row
                return record.to_snapshot(campaign_name)
        except SQLAlchemyError as exc:
            logger.exception("profit_sharing.store.error", extra={"season_id": season_id, "store": "seasons"})
            raise StoreError(f"Failed to load season {season_id}.") from exc

    def list_campaign_seasons(
        self,
        campaign_id: str,
        statuses: Sequence[str] = DEFAULT_SEASON_STATUSES,
    ) -> list[SeasonSnapshot]:
        try:
            with self._session() as session:
                statement = (
                    select(SeasonRecord, CampaignRecord.name)
                    .join(CampaignRecord, CampaignRecord.id == SeasonRecord.campaign_id, isouter=True)
                    .where(
                        SeasonRecord.campaign_id == campaign_id,
                        SeasonRecord.status.in_(list(statuses)),
                    )
                    .order_by(SeasonRecord.start_date, SeasonRecord.id)
                )
                return [record.to_snapshot(name) for record, name in session.exec(statement).all()]
        except SQLAlchemyError as exc:
            logger.exception(
                "profit_sharing.store.error", extra={"campaign_id": campaign_id, "store": "seasons"}
            )
            raise StoreError(f"Failed to list seasons for campaign {campaign_id}.") from exc


class SqlDonationStore(_SqlStore, DonationStore):
    """Runs the status -> group -> count-threshold aggregate in SQL."""

    def aggregate_by_donor(
        self, season_id: str, *, min_donations: int = 0
    ) -> list[DonorDonationStats]:
        donation_count = func.count(DonationRecord.id)
        statement = (
            select(
                DonationRecord.donor_id,
                donation_count.label("donation_count"),
                func.sum(DonationRecord.amount).label("total_contributed"),
                func.min(DonationRecord.donation_date).label("first_donation"),
                func.max(DonationRecord.donation_date).label("last_donation"),
            )
            .where(
                DonationRecord.season_id == season_id,
                DonationRecord.status == COMPLETED_STATUS,
            )
            .group_by(DonationRecord.donor_id)
            .having(donation_count >= min_donations)
        )
        try:
            with self._session() as session:
                rows = session.exec(statement).all()
        except SQLAlchemyError as exc:
            logger.exception(
                "profit_sharing.store.error", extra={"season_id": season_id, "store": "donations"}
            )
            raise StoreError(f"Failed to aggregate donations for season {season_id}.") from exc
        return [
            DonorDonationStats(
                donor_id=row.donor_id,
                donation_count=row.donation_count,
                total_contributed=float(row.total_contributed or 0.0),
                first_donation=row.first_donation,
                last_donation=row.last_donation,
            )
            for row in rows
        ]


class SqlDonorStore(_SqlStore, DonorStore):
    def get_profiles(self, donor_ids: Sequence[str]) -> dict[str, DonorProfile]:
        if not donor_ids:
            return {}
        try:
            with self._session() as session:
                statement = select(DonorRecord).where(DonorRecord.id.in_(list(donor_ids)))
                return {record.id: record.to_profile() for record in session.exec(statement).all()}
        except SQLAlchemyError as exc:
            logger.exception("profit_sharing.store.error", extra={"store": "donors"})
            raise StoreError("Failed to load donor profiles.") from exc


def build_stores(database_url: str | None = None, *, engine: Engine | None = None) -> ProfitSharingStores:
    """Instantiate stores using DATABASE_URL when available."""
    resolved_url = database_url or settings.database_url
    if engine is None and not resolved_url:
        logger.info("profit_sharing.stores.initialized", extra={"backend": "memory"})
        return ProfitSharingStores(
            seasons=InMemorySeasonStore(),
            donations=InMemoryDonationStore(),
            donors=InMemoryDonorStore(),
        )
    try:
        sql_engine = engine or build_engine(
            resolved_url,
            pool_min_size=settings.db_pool_min_size,
            pool_max_size=settings.db_pool_max_size,
        )
    except Exception:
        logger.exception("profit_sharing.stores.init_failed", extra={"backend": "database"})
        raise
    logger.info("profit_sharing.stores.initialized", extra={"backend": "database"})
    return ProfitSharingStores(
        seasons=SqlSeasonStore(sql_engine),
        donations=SqlDonationStore(sql_engine),
        donors=SqlDonorStore(sql_engine),
    )
