import pytest

from config.settings import Settings, get_settings, validate_settings


def test_defaults(monkeypatch):
    for name in ("APP_NAME", "APP_VERSION", "PORT", "LOG_LEVEL", "ALLOWED_ORIGINS", "PEER_ID_PREFIX", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.banner == "BuzzU Signaling Server v1.0"
    assert settings.port == 8000
    assert settings.allowed_origins == ["*"]
    assert settings.peer_id_prefix == "peer_"
    assert not settings.is_production


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = get_settings()

    assert settings.port == 9001
    assert settings.log_level == "DEBUG"
    assert settings.allowed_origins == ["https://a.example", "https://b.example"]
    assert settings.is_production


def test_validate_accepts_defaults():
    validate_settings(Settings())


@pytest.mark.parametrize("settings", [
    Settings(port=0),
    Settings(port=70000),
    Settings(log_level="LOUD"),
])
def test_validate_rejects_bad_values(settings):
    with pytest.raises(RuntimeError):
        validate_settings(settings)
