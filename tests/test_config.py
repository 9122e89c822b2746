from campaigns.config import Settings
from campaigns.services.profit_sharing.engine import ProfitSharingEngine, build_context
from tests.utils import build_memory_stores


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.profit_sharing_min_donations == 5
    assert settings.profit_sharing_selected_donors == 2
    assert settings.profit_sharing_random_seed is None
    assert settings.database_url is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PROFIT_SHARING_MIN_DONATIONS", "3")
    monkeypatch.setenv("PROFIT_SHARING_RANDOM_SEED", "42")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///campaigns.db")

    settings = Settings(_env_file=None)

    assert settings.profit_sharing_min_donations == 3
    assert settings.profit_sharing_random_seed == 42
    assert settings.database_url == "sqlite:///campaigns.db"


def test_engine_context_follows_settings(monkeypatch):
    from campaigns.services.profit_sharing import engine as engine_module

    monkeypatch.setattr(engine_module.settings, "profit_sharing_selected_donors", 3)

    context = build_context()
    engine = ProfitSharingEngine(stores=build_memory_stores())

    assert context.selected_donors == 3
    assert engine.context.selected_donors == 3


def test_engine_singleton_uses_memory_stores_without_database(monkeypatch):
    from campaigns.services.profit_sharing import engine as engine_module

    monkeypatch.setattr(engine_module, "_ENGINE_INSTANCE", None)
    monkeypatch.setattr(engine_module.settings, "database_url", None)

    first = engine_module.get_profit_sharing_engine()

    assert first is engine_module.get_profit_sharing_engine()
    assert first.execute_profit_sharing("season-1").code == "404_SEASON_NOT_FOUND"
