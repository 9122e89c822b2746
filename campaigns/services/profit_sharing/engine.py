"""Profit-sharing orchestrator: eligibility, donor draw, profit and vendor split."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from campaigns.config import settings
from campaigns.models.profit_sharing import (
    CampaignOverview,
    CampaignProfitStats,
    DonorContribution,
    EligibilitySummary,
    EligibleDonorEntry,
    FailedDistribution,
    PotentialProfit,
    ProfitSharingFailure,
    ProfitSharingOutcome,
    ProfitSharingResult,
    ProfitSharingSummary,
    SeasonPotential,
    SeasonReference,
    SeasonSnapshot,
    SelectedDonor,
    SelectedDonorContributions,
    SelectedDonorIdentity,
    SummaryTotals,
    VendorDistribution,
)
from campaigns.observability.metrics import metrics
from campaigns.services.profit_sharing.calculator import (
    VENDOR_SPLIT,
    calculate_profit,
    distribute_to_vendors,
    round_money,
)
from campaigns.services.profit_sharing.eligibility import (
    ELIGIBLE_STATUSES,
    check_season_eligibility,
)
from campaigns.services.profit_sharing.errors import (
    INSUFFICIENT_DONORS,
    NO_ELIGIBLE_DONORS,
    PROFIT_SHARING_FAILED,
    SEASON_NOT_ELIGIBLE,
    SEASON_NOT_FOUND,
    ProfitSharingConfigError,
)
from campaigns.services.profit_sharing.selection import select_random_donors
from campaigns.services.profit_sharing.stores import ProfitSharingStores, build_stores

logger = logging.getLogger(__name__)

EXECUTED_MESSAGE = "Profit sharing executed successfully"
SIMULATED_MESSAGE = "Profit sharing simulation completed (not executed)"
UNKNOWN_CAMPAIGN = "Unknown"


@dataclass(frozen=True)
class ProfitSharingContext:
    """Thresholds fixed when the engine is built."""

    min_donations: int = 5
    selected_donors: int = 2
    random_seed: int | None = None

    def validate(self) -> None:
        if self.min_donations < 1:
            raise ProfitSharingConfigError(
                f"min_donations must be at least 1, got {self.min_donations}."
            )
        if self.selected_donors < 1:
            raise ProfitSharingConfigError(
                f"selected_donors must be at least 1, got {self.selected_donors}."
            )


class ProfitSharingEngine:
    """Runs profit sharing for seasons. Reads from the stores and never writes."""

    def __init__(
        self,
        *,
        stores: ProfitSharingStores | None = None,
        context: ProfitSharingContext | None = None,
        rng: random.Random | None = None,
    ) -> None:
        resolved_context = context or build_context()
        resolved_context.validate()
        self._context = resolved_context
        self._stores = stores or build_stores()
        if rng is None and resolved_context.random_seed is not None:
            rng = random.Random(resolved_context.random_seed)
        self._rng = rng

    @property
    def context(self) -> ProfitSharingContext:
        return self._context

    def execute_profit_sharing(self, season_id: str) -> ProfitSharingOutcome:
        """Run the full pipeline for one season."""
        return self._execute(season_id, simulate=False)

    def simulate_profit_sharing(self, season_id: str) -> ProfitSharingOutcome:
        """Same as execution, tagged as a preview on success."""
        return self._execute(season_id, simulate=True)

    def get_eligible_donors(self, season_id: str) -> list[DonorContribution]:
        """Active donors with at least ``min_donations`` completed donations."""
        min_donations = self._context.min_donations
        stats = self._stores.donations.aggregate_by_donor(season_id, min_donations=min_donations)
        qualifying = [entry for entry in stats if entry.donation_count >= min_donations]
        profiles = self._stores.donors.get_profiles([entry.donor_id for entry in qualifying])

        eligible: list[DonorContribution] = []
        for entry in qualifying:
            profile = profiles.get(entry.donor_id)
            if profile is None or not profile.is_active:
                continue
            eligible.append(
                DonorContribution(
                    donor=profile,
                    donation_count=entry.donation_count,
                    total_contributed=entry.total_contributed,
                    first_donation=entry.first_donation,
                    last_donation=entry.last_donation,
                )
            )
        metrics.gauge("profit_sharing.eligible_donors", len(eligible))
        logger.info(
            "profit_sharing.eligible_donors",
            extra={
                "season_id": season_id,
                "qualifying": len(qualifying),
                "eligible": len(eligible),
            },
        )
        return eligible

    def get_profit_sharing_summary(self, season_ids: Sequence[str]) -> ProfitSharingSummary:
        """Execute every season and total the successful distributions."""
        outcomes = [self.execute_profit_sharing(season_id) for season_id in season_ids]
        successful = [outcome for outcome in outcomes if isinstance(outcome, ProfitSharingResult)]
        failed = [outcome for outcome in outcomes if isinstance(outcome, ProfitSharingFailure)]

        total_profit = sum(result.profit_calculation.final_profit for result in successful)
        to_agents = sum(result.vendor_distribution.vendors.agents.total for result in successful)
        to_stakeholders = sum(
            result.vendor_distribution.vendors.stakeholders.total for result in successful
        )
        return ProfitSharingSummary(
            summary=SummaryTotals(
                total_seasons=len(season_ids),
                successful=len(successful),
                failed=len(failed),
                total_profit=round_money(total_profit),
                total_to_agents=round_money(to_agents),
                total_to_stakeholders=round_money(to_stakeholders),
            ),
            successful_distributions=successful,
            failed_distributions=[
                FailedDistribution(
                    season_id=failure.season_id or (failure.season.id if failure.season else None),
                    error=failure.error,
                    code=failure.code,
                    message=failure.message,
                )
                for failure in failed
            ],
        )

    def get_campaign_profit_stats(self, campaign_id: str) -> CampaignProfitStats:
        """Potential profit over a campaign's eligible seasons; nothing is executed."""
        seasons = self._stores.seasons.list_campaign_seasons(campaign_id, ELIGIBLE_STATUSES)
        eligible = [season for season in seasons if check_season_eligibility(season).is_eligible]

        breakdown = [
            SeasonPotential(
                id=season.id,
                name=season.name,
                total_raised=season.total_raised,
                profit=calculate_profit(season.total_raised).final_profit,
            )
            for season in eligible
        ]
        total = round_money(sum(entry.profit for entry in breakdown))
        to_agents = round_money(total * VENDOR_SPLIT["AGENTS"])
        logger.info(
            "profit_sharing.campaign_stats",
            extra={
                "campaign_id": campaign_id,
                "seasons": len(seasons),
                "eligible_seasons": len(eligible),
            },
        )
        return CampaignProfitStats(
            campaign=CampaignOverview(
                id=campaign_id,
                total_seasons=len(seasons),
                eligible_seasons=len(eligible),
            ),
            potential_profit=PotentialProfit(
                total=total,
                to_agents=to_agents,
                to_stakeholders=round_money(total - to_agents),
            ),
            season_breakdown=breakdown,
        )

    def _execute(self, season_id: str, *, simulate: bool) -> ProfitSharingOutcome:
        mode = "simulation" if simulate else "execution"
        with metrics.timer("profit_sharing.latency_ms", tags={"mode": mode}) as timer_tags:
            try:
                outcome = self._run(season_id)
            except Exception as exc:
                logger.exception(
                    "profit_sharing.failed",
                    extra={"season_id": season_id, "mode": mode, "code": getattr(exc, "code", None)},
                )
                outcome = ProfitSharingFailure(
                    error="Failed to execute profit sharing",
                    code=PROFIT_SHARING_FAILED,
                    message=str(exc),
                    season_id=season_id,
                )
            code = outcome.code if isinstance(outcome, ProfitSharingFailure) else "success"
            timer_tags["outcome"] = code

        if simulate and isinstance(outcome, ProfitSharingResult):
            outcome = outcome.model_copy(update={"message": SIMULATED_MESSAGE, "is_simulation": True})

        metrics.increment("profit_sharing.executions", tags={"mode": mode, "outcome": code})
        return outcome

    def _run(self, season_id: str) -> ProfitSharingOutcome:
        season = self._stores.seasons.get_season(season_id)
        if season is None:
            logger.info("profit_sharing.season_not_found", extra={"season_id": season_id})
            return ProfitSharingFailure(
                error="Season not found",
                code=SEASON_NOT_FOUND,
                season_id=season_id,
            )

        eligibility = check_season_eligibility(season)
        if not eligibility.is_eligible:
            logger.info(
                "profit_sharing.not_eligible",
                extra={"season_id": season_id, "reason": eligibility.reason},
            )
            return ProfitSharingFailure(
                error=eligibility.reason or "Season is not eligible for profit sharing",
                code=SEASON_NOT_ELIGIBLE,
                details=eligibility.details,
                season=SeasonReference(id=season.id, name=season.name, campaign=season.campaign_name),
                season_id=season.id,
            )

        min_donations = self._context.min_donations
        required = self._context.selected_donors
        eligible = self.get_eligible_donors(season_id)
        if not eligible:
            return ProfitSharingFailure(
                error="No eligible donors found",
                code=NO_ELIGIBLE_DONORS,
                message=f"No donors have made at least {min_donations} donations to this season",
                season=SeasonReference(
                    id=season.id,
                    name=season.name,
                    total_donations=season.donation_count,
                ),
                season_id=season.id,
            )

        if len(eligible) < required:
            return ProfitSharingFailure(
                error="Insufficient eligible donors",
                code=INSUFFICIENT_DONORS,
                message=(
                    f"Found only {len(eligible)} eligible donor(s), but {required} are required"
                ),
                season=SeasonReference(id=season.id, name=season.name),
                season_id=season.id,
                eligible_donors=[
                    EligibleDonorEntry(
                        full_name=entry.donor.full_name,
                        email=entry.donor.email,
                        donation_count=entry.donation_count,
                    )
                    for entry in eligible
                ],
            )

        selected = select_random_donors(eligible, required, rng=self._rng)
        profit = calculate_profit(season.total_raised)
        distribution = distribute_to_vendors(profit.final_profit, season.total_raised)
        self._report_overallocation(season, distribution)

        result = ProfitSharingResult(
            message=EXECUTED_MESSAGE,
            season=SeasonReference(
                id=season.id,
                name=season.name,
                campaign=season.campaign_name or UNKNOWN_CAMPAIGN,
                goal=season.goal,
                total_raised=season.total_raised,
                donation_count=season.donation_count,
                status=season.status,
            ),
            eligibility=EligibilitySummary(
                total_eligible_donors=len(eligible),
                minimum_donations_required=min_donations,
                all_eligible_donors=[
                    EligibleDonorEntry(
                        full_name=entry.donor.full_name,
                        email=entry.donor.email,
                        donation_count=entry.donation_count,
                        total_contributed=round_money(entry.total_contributed),
                    )
                    for entry in eligible
                ],
            ),
            selected_donors=[
                SelectedDonor(
                    rank=rank,
                    donor=SelectedDonorIdentity(
                        id=entry.donor.id,
                        full_name=entry.donor.full_name,
                        email=entry.donor.email,
                        donor_type=entry.donor.donor_type,
                    ),
                    contributions=SelectedDonorContributions(
                        donation_count=entry.donation_count,
                        total_contributed=round_money(entry.total_contributed),
                        first_donation=entry.first_donation,
                        last_donation=entry.last_donation,
                    ),
                )
                for rank, entry in enumerate(selected, start=1)
            ],
            profit_calculation=profit,
            vendor_distribution=distribution,
            executed_at=datetime.now(timezone.utc),
        )
        logger.info(
            "profit_sharing.executed",
            extra={
                "season_id": season.id,
                "eligible_donors": len(eligible),
                "selected_donors": [entry.donor.id for entry in selected],
                "final_profit": profit.final_profit,
            },
        )
        return result

    @staticmethod
    def _report_overallocation(season: SeasonSnapshot, distribution: VendorDistribution) -> None:
        verification = distribution.vendors.agents.distribution.verification
        if not verification.overallocated:
            return
        metrics.increment("profit_sharing.agent_overallocation")
        logger.warning(
            "profit_sharing.agent_overallocation",
            extra={
                "season_id": season.id,
                "agents_total": distribution.vendors.agents.total,
                "total_allocated": verification.total_allocated,
                "overallocation": verification.overallocation,
            },
        )


def build_context() -> ProfitSharingContext:
    return ProfitSharingContext(
        min_donations=settings.profit_sharing_min_donations,
        selected_donors=settings.profit_sharing_selected_donors,
        random_seed=settings.profit_sharing_random_seed,
    )


_ENGINE_INSTANCE: ProfitSharingEngine | None = None


def get_profit_sharing_engine() -> ProfitSharingEngine:
    """Singleton accessor built from settings."""
    global _ENGINE_INSTANCE  # noqa: PLW0603
    if _ENGINE_INSTANCE is None:
        _ENGINE_INSTANCE = ProfitSharingEngine()
    return _ENGINE_INSTANCE
