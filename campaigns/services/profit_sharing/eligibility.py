"""Season eligibility gate for profit sharing."""

from __future__ import annotations

from typing import Final

from campaigns.models.profit_sharing import EligibilityResult, SeasonSnapshot
from campaigns.services.profit_sharing.calculator import round_money

ELIGIBLE_STATUSES: Final[tuple[str, ...]] = ("active", "completed")


def check_season_eligibility(season: SeasonSnapshot | None) -> EligibilityResult:
    """Evaluate the four gates in order; the first failing gate wins."""
    if season is None:
        return EligibilityResult(reason="Season not found")

    if not season.goal or season.goal <= 0:
        return EligibilityResult(
            reason="Season has no goal set",
            details={"goal": season.goal},
        )

    if not season.goal_reached:
        return EligibilityResult(
            reason="Season goal not yet reached",
            details={
                "goal": season.goal,
                "raised": season.total_raised,
                "remaining": round_money(season.goal - season.total_raised),
                "progressPercent": round_money(season.total_raised / season.goal * 100),
            },
        )

    if season.status not in ELIGIBLE_STATUSES:
        return EligibilityResult(
            reason=f"Season status is '{season.status}' (must be 'active' or 'completed')",
            details={"status": season.status},
        )

    return EligibilityResult(
        is_eligible=True,
        reason="Season is eligible for profit sharing",
        details={
            "goal": season.goal,
            "raised": season.total_raised,
            "progressPercent": 100,
            "status": season.status,
        },
    )
