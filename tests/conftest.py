import random

import pytest

from campaigns.services.profit_sharing import engine as engine_module
from campaigns.services.profit_sharing.engine import ProfitSharingContext, ProfitSharingEngine
from tests.helpers.metrics_stub import StubMetrics
from tests.utils import build_memory_stores, make_donations, make_donor, make_season


@pytest.fixture
def stub_metrics(monkeypatch):
    """Capture engine metrics instead of logging them."""
    stub = StubMetrics()
    monkeypatch.setattr(engine_module, "metrics", stub)
    return stub


@pytest.fixture
def scenario_stores():
    """Goal reached, six eligible donors plus three that must be filtered out."""
    donors = [make_donor(index) for index in range(1, 7)]
    donations = []
    for index, donor in enumerate(donors, start=1):
        donations.extend(make_donations(donor.id, 4 + index, amount=50.0 * index))

    inactive = make_donor(7, is_active=False)
    below_threshold = make_donor(8)
    mostly_pending = make_donor(9)
    donations.extend(make_donations(inactive.id, 6))
    donations.extend(make_donations(below_threshold.id, 4))
    donations.extend(make_donations(mostly_pending.id, 4))
    donations.extend(make_donations(mostly_pending.id, 3, status="pending"))
    donations.extend(make_donations(donors[0].id, 3, season_id="season-other"))

    return build_memory_stores(
        seasons=[make_season()],
        donors=[*donors, inactive, below_threshold, mostly_pending],
        donations=donations,
    )


@pytest.fixture
def seeded_engine(scenario_stores, stub_metrics):
    return ProfitSharingEngine(
        stores=scenario_stores,
        context=ProfitSharingContext(min_donations=5, selected_donors=2),
        rng=random.Random(2024),
    )
