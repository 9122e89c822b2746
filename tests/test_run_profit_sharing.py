import json
from pathlib import Path

import pytest

from campaigns.core.database import build_engine
from tools import run_profit_sharing
from tests.utils import build_memory_stores, make_season


def test_single_season_prints_result(scenario_stores, capsys):
    exit_code = run_profit_sharing.main(["--season-id", "season-1", "--seed", "2024"], stores=scenario_stores)

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["success"] is True
    assert len(payload["selectedDonors"]) == 2
    assert payload["vendorDistribution"]["vendors"]["agents"]["total"] == pytest.approx(24_948.00)
    assert payload["vendorDistribution"]["summary"]["bmg"] == pytest.approx(14_968.80)


def test_seeded_runs_are_reproducible(scenario_stores, capsys):
    run_profit_sharing.main(["--season-id", "season-1", "--seed", "9"], stores=scenario_stores)
    first = json.loads(capsys.readouterr().out)
    run_profit_sharing.main(["--season-id", "season-1", "--seed", "9"], stores=scenario_stores)
    second = json.loads(capsys.readouterr().out)

    assert first["selectedDonors"] == second["selectedDonors"]


def test_simulation_writes_output_file(scenario_stores, tmp_path: Path):
    output = tmp_path / "reports" / "season-1.json"

    exit_code = run_profit_sharing.main(
        ["--season-id", "season-1", "--simulate", "--output", str(output)],
        stores=scenario_stores,
    )

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert exit_code == 0
    assert payload["isSimulation"] is True


def test_failure_returns_non_zero(capsys):
    stores = build_memory_stores(seasons=[make_season(total_raised=10.0)])

    exit_code = run_profit_sharing.main(["--season-id", "season-1"], stores=stores)

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert payload["success"] is False
    assert payload["code"] == "400_SEASON_NOT_ELIGIBLE"


def test_multiple_seasons_produce_summary(scenario_stores, capsys):
    exit_code = run_profit_sharing.main(
        ["--season-id", "season-1", "--season-id", "season-missing"],
        stores=scenario_stores,
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert payload["summary"]["successful"] == 1
    assert payload["summary"]["failed"] == 1
    assert payload["failedDistributions"][0]["seasonId"] == "season-missing"


def test_campaign_stats(scenario_stores, capsys):
    exit_code = run_profit_sharing.main(["--campaign-id", "campaign-1"], stores=scenario_stores)

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["campaign"]["eligibleSeasons"] == 1
    assert payload["potentialProfit"]["total"] == pytest.approx(49_896.00)


def test_database_url_option(tmp_path: Path, capsys):
    database_url = f"sqlite:///{tmp_path / 'cli.db'}"
    build_engine(database_url, auto_create_schema=True).dispose()

    exit_code = run_profit_sharing.main(["--season-id", "season-1", "--database-url", database_url])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert payload["code"] == "404_SEASON_NOT_FOUND"
    assert payload["seasonId"] == "season-1"


def test_target_is_required():
    with pytest.raises(SystemExit):
        run_profit_sharing.parse_args([])
