"""Tests for settings and engine options."""
from taskboard_core.config import Settings
from taskboard_core.database import _engine_options


class TestSettings:
    """Test environment overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TASKBOARD_DEADLINE_DAYS_AHEAD", raising=False)
        settings = Settings(_env_file=None)
        assert settings.deadline_days_ahead == 3
        assert settings.notification_link_prefix == "/projects"
        assert settings.realtime_send_timeout == 5.0

    def test_prefixed_environment_variables(self, monkeypatch):
        monkeypatch.setenv("TASKBOARD_DEADLINE_DAYS_AHEAD", "5")
        monkeypatch.setenv("TASKBOARD_DATABASE_URL", "postgresql://app@db/taskboard")
        settings = Settings(_env_file=None)
        assert settings.deadline_days_ahead == 5
        assert settings.database_url == "postgresql://app@db/taskboard"


class TestEngineOptions:
    def test_sqlite_skips_pool_settings(self):
        assert _engine_options("sqlite:///./x.db") == {"connect_args": {"check_same_thread": False}}

    def test_server_database_pool(self):
        options = _engine_options("postgresql://app@db/taskboard")
        assert options["pool_pre_ping"] is True
        assert options["pool_size"] == 5
