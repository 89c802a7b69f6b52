from config_service.config import DEFAULT_ESCAPE_HATCH_URL, DEFAULT_REPORT_API_URL, DashboardSettings


def test_defaults(monkeypatch):
    monkeypatch.delenv("REPORT_API_URL", raising=False)
    monkeypatch.delenv("REPORT_API_TIMEOUT", raising=False)
    settings = DashboardSettings(_env_file=None)
    assert settings.REPORT_API_URL == DEFAULT_REPORT_API_URL
    assert settings.REPORT_API_KEY_HEADER == "x-api-key"
    assert settings.REPORT_PERIOD_PARAM == "year"
    assert settings.REPORT_API_TIMEOUT is None
    assert settings.IDENTITY_QUERY_PARAM == "userId"
    assert settings.ESCAPE_HATCH_URL == DEFAULT_ESCAPE_HATCH_URL


def test_report_api_config_from_env(monkeypatch):
    monkeypatch.setenv("REPORT_API_KEY", "key123")
    monkeypatch.setenv("REPORT_API_URL", "http://reports.local/api/dashboard/")
    monkeypatch.setenv("REPORT_API_TIMEOUT", "7.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = DashboardSettings(_env_file=None)
    cfg = settings.get_report_api_config()
    assert settings.REPORT_API_KEY == "key123"
    assert cfg["url"] == "http://reports.local/api/dashboard"
    assert cfg["timeout"] == 7.5
    assert cfg["api_key_configured"] is True
    assert "key123" not in cfg.values()
    assert settings.LOG_LEVEL == "DEBUG"


def test_legacy_key_name_is_accepted(monkeypatch):
    monkeypatch.delenv("REPORT_API_KEY", raising=False)
    monkeypatch.setenv("NEXT_PUBLIC_API_KEY", "legacy-key")
    settings = DashboardSettings(_env_file=None)
    assert settings.REPORT_API_KEY == "legacy-key"


def test_blank_key_is_not_configured(monkeypatch):
    monkeypatch.setenv("REPORT_API_KEY", "  ")
    settings = DashboardSettings(_env_file=None)
    assert settings.REPORT_API_KEY is None
    assert settings.api_key_configured is False


def test_allowed_origins_default(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    settings = DashboardSettings(_env_file=None)
    assert settings.get_allowed_origins() == ["http://localhost:5173"]


def test_allowed_origins_from_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://dash.example/, https://reports.example,")
    monkeypatch.setenv("ESCAPE_HATCH_URL", "https://escape.example/")
    settings = DashboardSettings(_env_file=None)
    assert settings.get_allowed_origins() == ["https://dash.example", "https://reports.example"]
    assert "https://escape.example" not in settings.get_allowed_origins()
