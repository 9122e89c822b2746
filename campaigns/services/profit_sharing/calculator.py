"""Profit formula and vendor allocation tables.

Profit is ``total_raised x 1.8 x 0.1 x 0.44 x 0.63`` (about 4.99% of the amount
raised). It is split 50/50 between agents and stakeholders:

* agents: freelancing 39.49%, corporate 30.50%, a major agent paid
  $10,000 per $1,000,000 raised, and miscellaneous taking the remainder;
* stakeholders: R1 5%, PB 15%, SF 20%, BMG 60%.

Everything here is pure and deterministic.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from campaigns.models.profit_sharing import (
    AgentBreakdown,
    AgentDistribution,
    AgentsVendor,
    AllocationLine,
    AllocationVerification,
    CalculationStep,
    DistributionSummary,
    DistributionVerification,
    MajorAgentCalculation,
    MajorAgentLine,
    ProfitCalculation,
    ProfitSteps,
    StakeholderBreakdown,
    StakeholderDistribution,
    StakeholdersVendor,
    VendorDistribution,
    Vendors,
)

MULTIPLIERS: Final[dict[str, float]] = {
    "INITIAL": 1.8,
    "FIRST": 0.1,
    "SECOND": 0.44,
    "FINAL": 0.63,
}
FINAL_MULTIPLIER: Final[float] = (
    MULTIPLIERS["INITIAL"] * MULTIPLIERS["FIRST"] * MULTIPLIERS["SECOND"] * MULTIPLIERS["FINAL"]
)

VENDOR_SPLIT: Final[dict[str, float]] = {
    "AGENTS": 0.5,
    "STAKEHOLDERS": 0.5,
}

AGENT_DISTRIBUTION: Final[dict[str, float]] = {
    "FREELANCING": 0.3949,
    "CORPORATE": 0.3050,
}
MAJOR_AGENT_PER_MILLION: Final[int] = 10_000

STAKEHOLDER_DISTRIBUTION: Final[dict[str, float]] = {
    "R1": 0.05,
    "PB": 0.15,
    "SF": 0.20,
    "BMG": 0.60,
}

VERIFICATION_TOLERANCE: Final[float] = 0.01

_CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round half-up to cents."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def _percent(rate: float) -> float:
    return round_money(rate * 100)


def _format_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{name} must be zero or positive, got {value}.")


def calculate_profit(total_raised: float) -> ProfitCalculation:
    """Apply the four multipliers in sequence.

    The chain is multiplied unrounded and ``final_profit`` is rounded once.
    Each step's ``result`` is the rounded value of its unrounded intermediate,
    and each ``formula`` starts from the previous step's rounded display value.
    """
    _require_non_negative("total_raised", total_raised)
    step1 = total_raised * MULTIPLIERS["INITIAL"]
    step2 = step1 * MULTIPLIERS["FIRST"]
    step3 = step2 * MULTIPLIERS["SECOND"]
    final_profit = step3 * MULTIPLIERS["FINAL"]

    calculations = ProfitSteps(
        step1=CalculationStep(
            formula=f"{_format_number(total_raised)} × {MULTIPLIERS['INITIAL']}",
            result=round_money(step1),
        ),
        step2=CalculationStep(
            formula=f"{_format_number(round_money(step1))} × {MULTIPLIERS['FIRST']}",
            result=round_money(step2),
        ),
        step3=CalculationStep(
            formula=f"{_format_number(round_money(step2))} × {MULTIPLIERS['SECOND']}",
            result=round_money(step3),
        ),
        step4=CalculationStep(
            formula=f"{_format_number(round_money(step3))} × {MULTIPLIERS['FINAL']}",
            result=round_money(final_profit),
        ),
    )
    return ProfitCalculation(
        total_raised=total_raised,
        calculations=calculations,
        final_profit=round_money(final_profit),
        effective_rate=f"{_format_number(_percent(FINAL_MULTIPLIER))}%",
    )


def calculate_agent_distribution(agents_share: float, total_raised: float) -> AgentDistribution:
    """Split the agents' half; miscellaneous absorbs the remainder, floored at zero."""
    _require_non_negative("agents_share", agents_share)
    _require_non_negative("total_raised", total_raised)
    millions_raised = total_raised / 1_000_000
    major = millions_raised * MAJOR_AGENT_PER_MILLION
    freelancing = agents_share * AGENT_DISTRIBUTION["FREELANCING"]
    corporate = agents_share * AGENT_DISTRIBUTION["CORPORATE"]

    allocated = freelancing + corporate + major
    miscellaneous = max(0.0, agents_share - allocated)
    total_allocated = allocated + miscellaneous
    overallocation = max(0.0, total_allocated - agents_share)

    def share_of_agents(amount: float) -> float:
        if agents_share <= 0:
            return 0.0
        return round_money(amount / agents_share * 100)

    breakdown = AgentBreakdown(
        freelancing=AllocationLine(
            amount=round_money(freelancing),
            percentage=_percent(AGENT_DISTRIBUTION["FREELANCING"]),
            description="Freelancing Agent",
        ),
        corporate=AllocationLine(
            amount=round_money(corporate),
            percentage=_percent(AGENT_DISTRIBUTION["CORPORATE"]),
            description="Corporate Agent",
        ),
        major=MajorAgentLine(
            amount=round_money(major),
            percentage=share_of_agents(major),
            description="Major Agent",
            calculation=MajorAgentCalculation(
                millions_raised=round_money(millions_raised),
                rate_per_million=MAJOR_AGENT_PER_MILLION,
                formula=(
                    f"{_format_number(round_money(millions_raised))} × "
                    f"${MAJOR_AGENT_PER_MILLION:,}"
                ),
            ),
        ),
        miscellaneous=AllocationLine(
            amount=round_money(miscellaneous),
            percentage=share_of_agents(miscellaneous),
            description="Miscellaneous",
        ),
    )
    return AgentDistribution(
        total=round_money(agents_share),
        breakdown=breakdown,
        verification=AllocationVerification(
            total_allocated=round_money(total_allocated),
            matches=abs(agents_share - total_allocated) < VERIFICATION_TOLERANCE,
            overallocated=overallocation >= VERIFICATION_TOLERANCE,
            overallocation=round_money(overallocation),
        ),
    )


def calculate_stakeholder_distribution(stakeholders_share: float) -> StakeholderDistribution:
    _require_non_negative("stakeholders_share", stakeholders_share)
    r1 = stakeholders_share * STAKEHOLDER_DISTRIBUTION["R1"]
    pb = stakeholders_share * STAKEHOLDER_DISTRIBUTION["PB"]
    sf = stakeholders_share * STAKEHOLDER_DISTRIBUTION["SF"]
    bmg = stakeholders_share * STAKEHOLDER_DISTRIBUTION["BMG"]
    total_allocated = r1 + pb + sf + bmg

    def line(amount: float, key: str) -> AllocationLine:
        return AllocationLine(
            amount=round_money(amount),
            percentage=_percent(STAKEHOLDER_DISTRIBUTION[key]),
            description=key,
        )

    return StakeholderDistribution(
        total=round_money(stakeholders_share),
        breakdown=StakeholderBreakdown(
            r1=line(r1, "R1"),
            pb=line(pb, "PB"),
            sf=line(sf, "SF"),
            bmg=line(bmg, "BMG"),
        ),
        verification=AllocationVerification(
            total_allocated=round_money(total_allocated),
            matches=abs(stakeholders_share - total_allocated) < VERIFICATION_TOLERANCE,
        ),
    )


def distribute_to_vendors(total_profit: float, total_raised: float) -> VendorDistribution:
    """Split profit between agents and stakeholders with nested breakdowns.

    The agents' half is rounded half-up and the stakeholders take the rest, so
    the two published totals always add up to the published profit.
    """
    _require_non_negative("total_profit", total_profit)
    published_profit = round_money(total_profit)
    agents_share = total_profit * VENDOR_SPLIT["AGENTS"]
    agents_total = round_money(agents_share)
    stakeholders_total = round_money(published_profit - agents_total)

    agents = calculate_agent_distribution(agents_share, total_raised)
    stakeholders = calculate_stakeholder_distribution(stakeholders_total)
    distributed = round_money(agents_total + stakeholders_total)

    return VendorDistribution(
        total_profit=published_profit,
        vendors=Vendors(
            agents=AgentsVendor(
                total=agents_total,
                percentage=_percent(VENDOR_SPLIT["AGENTS"]),
                distribution=agents,
            ),
            stakeholders=StakeholdersVendor(
                total=stakeholders_total,
                percentage=_percent(VENDOR_SPLIT["STAKEHOLDERS"]),
                distribution=stakeholders,
            ),
        ),
        verification=DistributionVerification(
            total_distributed=distributed,
            matches=distributed == published_profit,
        ),
        summary=DistributionSummary(
            freelancing_agent=agents.breakdown.freelancing.amount,
            corporate_agent=agents.breakdown.corporate.amount,
            major_agent=agents.breakdown.major.amount,
            miscellaneous=agents.breakdown.miscellaneous.amount,
            r1=stakeholders.breakdown.r1.amount,
            pb=stakeholders.breakdown.pb.amount,
            sf=stakeholders.breakdown.sf.amount,
            bmg=stakeholders.breakdown.bmg.amount,
        ),
    )
