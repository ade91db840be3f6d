import pytest

from valdicass.server.errors import ConfigurationError
from valdicass.server.settings.config import Settings


def test_missing_sendgrid_key_is_fatal(tmp_path):
    creds = tmp_path / "sa.json"
    creds.write_text("{}", encoding="utf-8")
    s = Settings(sendgrid_api_key=None, firebase_credentials=str(creds))
    with pytest.raises(ConfigurationError):
        s.validate_startup()


def test_missing_credentials_file_is_fatal(tmp_path):
    s = Settings(sendgrid_api_key="SG.x", firebase_credentials=str(tmp_path / "nope.json"))
    with pytest.raises(ConfigurationError):
        s.validate_startup()


def test_valid_config(tmp_path):
    creds = tmp_path / "sa.json"
    creds.write_text("{}", encoding="utf-8")
    Settings(sendgrid_api_key="SG.x", firebase_credentials=str(creds)).validate_startup()


def test_env_defaults(monkeypatch):
    monkeypatch.setenv("PORT", "6001")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.com, https://b.com")
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)
    s = Settings()
    assert s.port == 6001
    assert s.cors_origins == ["https://a.com", "https://b.com"]
    assert s.sendgrid_api_key is None


def test_masked_hides_key():
    masked = Settings(sendgrid_api_key="SG.abcdefghijkl").masked()
    assert "abcdefghijkl" not in masked["sendgrid_api_key"]


def test_provider_init_fails_without_key(tmp_path):
    from valdicass.server.deps import init_providers
    from valdicass.server.main import create_app

    s = Settings(sendgrid_api_key=None, firebase_credentials=str(tmp_path / "x.json"))
    app = create_app(s)
    with pytest.raises(ConfigurationError):
        init_providers(app, s)
