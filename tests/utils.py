"""Builders for profit-sharing test data."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from campaigns.models.profit_sharing import DonorProfile, SeasonSnapshot
from campaigns.services.profit_sharing.stores import (
    DonationEntry,
    InMemoryDonationStore,
    InMemoryDonorStore,
    InMemorySeasonStore,
    ProfitSharingStores,
)

BASE_DATE = datetime(2025, 3, 1, tzinfo=timezone.utc)


def make_season(**overrides) -> SeasonSnapshot:
    payload = {
        "id": "season-1",
        "name": "Spring Season",
        "campaign_id": "campaign-1",
        "campaign_name": "Clean Water Drive",
        "goal": 1_000_000.0,
        "total_raised": 1_000_000.0,
        "donation_count": 40,
        "status": "completed",
    }
    payload.update(overrides)
    return SeasonSnapshot(**payload)


def make_donor(index: int, **overrides) -> DonorProfile:
    payload = {
        "id": f"donor-{index}",
        "first_name": f"Donor{index}",
        "last_name": "Tester",
        "email": f"donor{index}@example.org",
        "donor_type": "individual",
        "is_active": True,
    }
    payload.update(overrides)
    return DonorProfile(**payload)


def make_donations(
    donor_id: str,
    count: int,
    *,
    season_id: str = "season-1",
    amount: float = 100.0,
    status: str = "completed",
    start: datetime = BASE_DATE,
) -> list[DonationEntry]:
    return [
        DonationEntry(
            donor_id=donor_id,
            season_id=season_id,
            amount=amount,
            status=status,
            donation_date=start + timedelta(days=offset),
        )
        for offset in range(count)
    ]


def build_memory_stores(
    *,
    seasons: list[SeasonSnapshot] | None = None,
    donors: list[DonorProfile] | None = None,
    donations: list[DonationEntry] | None = None,
) -> ProfitSharingStores:
    return ProfitSharingStores(
        seasons=InMemorySeasonStore(seasons or []),
        donations=InMemoryDonationStore(donations or []),
        donors=InMemoryDonorStore(donors or []),
    )
