import pytest

from services.config_service import ConfigService, DashboardSettings


def test_defaults():
    config = ConfigService(DashboardSettings(_env_file=None)).load()
    assert config.signal_poll_ms == 3000
    assert config.position_poll_ms == 3000
    assert config.queue_poll_ms == 5000
    assert config.discard_stale


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://bot:8080")
    monkeypatch.setenv("QUEUE_POLL_MS", "7000")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    config = ConfigService(DashboardSettings(_env_file=None)).load()
    assert config.api_base_url == "http://bot:8080"
    assert config.queue_poll_ms == 7000
    assert config.log_level == "DEBUG"


def test_rejects_non_positive_interval():
    settings = DashboardSettings(_env_file=None, SIGNAL_POLL_MS=0)
    with pytest.raises(ValueError):
        ConfigService(settings).load()


def test_history_settings(monkeypatch):
    monkeypatch.setenv("HISTORY_LIMIT", "25")
    monkeypatch.setenv("HISTORY_CSV_PATH", "/tmp/history.csv")
    config = ConfigService(DashboardSettings(_env_file=None)).load()
    assert config.history_limit == 25
    assert config.history_poll_ms == 30000
    assert config.history_csv_path == "/tmp/history.csv"


def test_history_export_disabled_by_default():
    config = ConfigService(DashboardSettings(_env_file=None)).load()
    assert config.history_csv_path is None
