import pytest

from campaigns.services.profit_sharing.calculator import (
    FINAL_MULTIPLIER,
    calculate_profit,
    round_money,
)


def test_one_million_raised_yields_expected_profit():
    result = calculate_profit(1_000_000)

    assert result.final_profit == pytest.approx(49_896.00)
    assert result.effective_rate == "4.99%"
    steps = result.calculations
    assert steps.step1.result == pytest.approx(1_800_000.00)
    assert steps.step2.result == pytest.approx(180_000.00)
    assert steps.step3.result == pytest.approx(79_200.00)
    assert steps.step4.result == result.final_profit


def test_formulas_chain_the_displayed_values():
    steps = calculate_profit(1_000_000).calculations

    assert steps.step1.formula == "1000000 × 1.8"
    assert steps.step2.formula == "1800000 × 0.1"
    assert steps.step3.formula == "180000 × 0.44"
    assert steps.step4.formula == "79200 × 0.63"


def test_profit_is_idempotent():
    first = calculate_profit(1_234_567.89)
    second = calculate_profit(1_234_567.89)

    assert first == second
    assert first.final_profit == second.final_profit


@pytest.mark.parametrize("total_raised", [0.0, 1.0, 999.99, 250_000.0, 7_654_321.12, 1e9])
def test_final_profit_tracks_single_multiplier(total_raised):
    result = calculate_profit(total_raised)

    assert result.final_profit == pytest.approx(round_money(total_raised * FINAL_MULTIPLIER), abs=0.01)


def test_final_multiplier_is_product_of_stages():
    assert FINAL_MULTIPLIER == pytest.approx(0.049896)


def test_zero_raised_produces_zero_profit():
    result = calculate_profit(0)

    assert result.final_profit == 0
    assert result.calculations.step1.formula == "0 × 1.8"


def test_negative_total_is_rejected():
    with pytest.raises(ValueError):
        calculate_profit(-1)


def test_round_money_rounds_half_up():
    assert round_money(2.675) == 2.68
    assert round_money(0.125) == 0.13
    assert round_money(10) == 10.0


def test_payload_uses_camel_case_keys():
    payload = calculate_profit(500_000).to_payload()

    assert set(payload) == {"totalRaised", "calculations", "finalProfit", "effectiveRate"}
    assert payload["calculations"]["step4"]["result"] == payload["finalProfit"]
