"""Domain models consumed and produced by the profit-sharing engine."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with the camelCase keys callers read."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-safe dictionary using the public field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Inputs pulled from the season/donation/donor stores
# ---------------------------------------------------------------------------


class SeasonSnapshot(CamelModel):
    """Read-only view of a season with its campaign name populated."""

    id: str
    name: str = ""
    campaign_id: str | None = None
    campaign_name: str | None = None
    goal: float | None = None
    total_raised: float = 0.0
    donation_count: int = 0
    status: str = "upcoming"

    @property
    def goal_reached(self) -> bool:
        return bool(self.goal) and self.total_raised >= self.goal


class DonorProfile(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    donor_type: str = "individual"
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class DonorDonationStats(CamelModel):
    """Completed donations of one donor within one season."""

    donor_id: str
    donation_count: int
    total_contributed: float
    first_donation: datetime | None = None
    last_donation: datetime | None = None


class DonorContribution(CamelModel):
    """Donation statistics joined with the donor profile."""

    donor: DonorProfile
    donation_count: int
    total_contributed: float
    first_donation: datetime | None = None
    last_donation: datetime | None = None

    @property
    def donor_id(self) -> str:
        return self.donor.id


class EligibilityResult(CamelModel):
    is_eligible: bool = False
    reason: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Profit calculation
# ---------------------------------------------------------------------------


class CalculationStep(CamelModel):
    formula: str
    result: float


class ProfitSteps(CamelModel):
    step1: CalculationStep
    step2: CalculationStep
    step3: CalculationStep
    step4: CalculationStep


class ProfitCalculation(CamelModel):
    """Show-your-work breakdown of the four multiplicative stages."""

    total_raised: float
    calculations: ProfitSteps
    final_profit: float
    effective_rate: str


# ---------------------------------------------------------------------------
# Vendor distribution
# ---------------------------------------------------------------------------


class AllocationLine(CamelModel):
    amount: float
    percentage: float
    description: str


class MajorAgentCalculation(CamelModel):
    millions_raised: float
    rate_per_million: float
    formula: str


class MajorAgentLine(AllocationLine):
    calculation: MajorAgentCalculation


class AllocationVerification(CamelModel):
    """Audit block; mismatches are reported, never corrected."""

    total_allocated: float
    matches: bool
    overallocated: bool = False
    overallocation: float = 0.0


class AgentBreakdown(CamelModel):
    freelancing: AllocationLine
    corporate: AllocationLine
    major: MajorAgentLine
    miscellaneous: AllocationLine


class AgentDistribution(CamelModel):
    total: float
    breakdown: AgentBreakdown
    verification: AllocationVerification


class StakeholderBreakdown(CamelModel):
    r1: AllocationLine
    pb: AllocationLine
    sf: AllocationLine
    bmg: AllocationLine


class StakeholderDistribution(CamelModel):
    total: float
    breakdown: StakeholderBreakdown
    verification: AllocationVerification


class AgentsVendor(CamelModel):
    total: float
    percentage: float
    distribution: AgentDistribution


class StakeholdersVendor(CamelModel):
    total: float
    percentage: float
    distribution: StakeholderDistribution


class Vendors(CamelModel):
    agents: AgentsVendor
    stakeholders: StakeholdersVendor


class DistributionVerification(CamelModel):
    total_distributed: float
    matches: bool


class DistributionSummary(CamelModel):
    """Flat view of every leaf amount."""

    freelancing_agent: float
    corporate_agent: float
    major_agent: float
    miscellaneous: float
    r1: float
    pb: float
    sf: float
    bmg: float


class VendorDistribution(CamelModel):
    total_profit: float
    vendors: Vendors
    verification: DistributionVerification
    summary: DistributionSummary


# ---------------------------------------------------------------------------
# Orchestrator envelopes
# ---------------------------------------------------------------------------


class SeasonReference(CamelModel):
    """Season identity block; only the populated fields are serialized."""

    id: str
    name: str | None = None
    campaign: str | None = None
    goal: float | None = None
    total_raised: float | None = None
    donation_count: int | None = None
    total_donations: int | None = None
    status: str | None = None


class EligibleDonorEntry(CamelModel):
    full_name: str
    email: str
    donation_count: int
    total_contributed: float | None = None


class EligibilitySummary(CamelModel):
    total_eligible_donors: int
    minimum_donations_required: int
    all_eligible_donors: list[EligibleDonorEntry]


class SelectedDonorIdentity(CamelModel):
    id: str
    full_name: str
    email: str
    donor_type: str


class SelectedDonorContributions(CamelModel):
    donation_count: int
    total_contributed: float
    first_donation: datetime | None = None
    last_donation: datetime | None = None


class SelectedDonor(CamelModel):
    rank: int
    donor: SelectedDonorIdentity
    contributions: SelectedDonorContributions


class ProfitSharingResult(CamelModel):
    """Successful profit-sharing run. Never persisted by the engine."""

    success: Literal[True] = True
    message: str
    season: SeasonReference
    eligibility: EligibilitySummary
    selected_donors: list[SelectedDonor]
    profit_calculation: ProfitCalculation
    vendor_distribution: VendorDistribution
    executed_at: datetime
    is_simulation: bool = False


class ProfitSharingFailure(CamelModel):
    """Uniform failure envelope for soft failures and boundary errors."""

    success: Literal[False] = False
    error: str
    code: str
    message: str | None = None
    details: dict[str, Any] | None = None
    season: SeasonReference | None = None
    season_id: str | None = None
    eligible_donors: list[EligibleDonorEntry] | None = None


ProfitSharingOutcome = ProfitSharingResult | ProfitSharingFailure


class SummaryTotals(CamelModel):
    total_seasons: int
    successful: int
    failed: int
    total_profit: float
    total_to_agents: float
    total_to_stakeholders: float


class FailedDistribution(CamelModel):
    season_id: str | None = None
    error: str
    code: str
    message: str | None = None


class ProfitSharingSummary(CamelModel):
    summary: SummaryTotals
    successful_distributions: list[ProfitSharingResult]
    failed_distributions: list[FailedDistribution]


class CampaignOverview(CamelModel):
    id: str
    total_seasons: int
    eligible_seasons: int


class PotentialProfit(CamelModel):
    total: float
    to_agents: float
    to_stakeholders: float


class SeasonPotential(CamelModel):
    id: str
    name: str
    total_raised: float
    profit: float


class CampaignProfitStats(CamelModel):
    """Potential (not executed) profit across a campaign's eligible seasons."""

    campaign: CampaignOverview
    potential_profit: PotentialProfit
    season_breakdown: list[SeasonPotential]
