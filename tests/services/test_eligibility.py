import pytest

from campaigns.services.profit_sharing.eligibility import check_season_eligibility
from tests.utils import make_season


def test_missing_season_is_not_eligible():
    result = check_season_eligibility(None)

    assert result.is_eligible is False
    assert result.reason == "Season not found"


@pytest.mark.parametrize("goal", [None, 0.0, -10.0])
def test_season_without_positive_goal_is_rejected(goal):
    result = check_season_eligibility(make_season(goal=goal))

    assert result.is_eligible is False
    assert result.reason == "Season has no goal set"
    assert result.details == {"goal": goal}


def test_goal_not_reached_reports_progress():
    result = check_season_eligibility(make_season(goal=1_000_000.0, total_raised=250_000.0))

    assert result.is_eligible is False
    assert result.reason == "Season goal not yet reached"
    assert result.details == {
        "goal": 1_000_000.0,
        "raised": 250_000.0,
        "remaining": 750_000.0,
        "progressPercent": 25.0,
    }


def test_goal_short_by_one_cent_is_not_eligible():
    result = check_season_eligibility(make_season(total_raised=999_999.99))

    assert result.is_eligible is False
    assert result.reason == "Season goal not yet reached"
    assert result.details["remaining"] == pytest.approx(0.01)


def test_upcoming_season_is_rejected_even_with_goal_reached():
    result = check_season_eligibility(make_season(status="upcoming"))

    assert result.is_eligible is False
    assert result.reason == "Season status is 'upcoming' (must be 'active' or 'completed')"
    assert result.details == {"status": "upcoming"}


def test_goal_check_runs_before_status_check():
    result = check_season_eligibility(make_season(status="upcoming", total_raised=10.0))

    assert result.reason == "Season goal not yet reached"


@pytest.mark.parametrize("status", ["active", "completed"])
def test_reached_goal_with_open_status_is_eligible(status):
    result = check_season_eligibility(make_season(status=status, total_raised=1_500_000.0))

    assert result.is_eligible is True
    assert result.reason == "Season is eligible for profit sharing"
    assert result.details["progressPercent"] == 100
    assert result.details["status"] == status


@pytest.mark.parametrize(
    ("goal", "raised"),
    [(100.0, 0.0), (100.0, 99.99), (100.0, 100.0), (100.0, 100.01), (5_000.0, 12_000.0)],
)
@pytest.mark.parametrize("status", ["active", "completed"])
def test_eligibility_follows_goal_threshold(goal, raised, status):
    result = check_season_eligibility(make_season(goal=goal, total_raised=raised, status=status))

    assert result.is_eligible is (raised >= goal)
