"""Profit sharing for seasons that reached their fundraising goal."""

from __future__ import annotations

from campaigns.services.profit_sharing.calculator import (
    calculate_agent_distribution,
    calculate_profit,
    calculate_stakeholder_distribution,
    distribute_to_vendors,
)
from campaigns.services.profit_sharing.eligibility import check_season_eligibility
from campaigns.services.profit_sharing.engine import (
    ProfitSharingContext,
    ProfitSharingEngine,
    get_profit_sharing_engine,
)
from campaigns.services.profit_sharing.errors import (
    ProfitSharingError,
    StoreError,
    status_code_for,
)
from campaigns.services.profit_sharing.selection import select_random_donors
from campaigns.services.profit_sharing.stores import ProfitSharingStores, build_stores

__all__ = [
    "ProfitSharingContext",
    "ProfitSharingEngine",
    "ProfitSharingError",
    "ProfitSharingStores",
    "StoreError",
    "build_stores",
    "calculate_agent_distribution",
    "calculate_profit",
    "calculate_stakeholder_distribution",
    "check_season_eligibility",
    "distribute_to_vendors",
    "get_profit_sharing_engine",
    "select_random_donors",
    "status_code_for",
]
