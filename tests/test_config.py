import pytest
from pydantic import ValidationError

from nailapi.config import DEFAULT_TIMEOUT, LOGIN_ROUTE, REISSUE_PATH, ApiSettings


def test_defaults(monkeypatch):
    for name in ("NAILAPI_BASE_URL", "NAILAPI_TIMEOUT", "NAILAPI_REISSUE_PATH", "NAILAPI_LOGIN_ROUTE"):
        monkeypatch.delenv(name, raising=False)

    settings = ApiSettings()

    assert settings.timeout == DEFAULT_TIMEOUT == 10.0
    assert settings.reissue_path == REISSUE_PATH == "/auth/reissue"
    assert settings.login_route == LOGIN_ROUTE == "SocialLogin"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NAILAPI_BASE_URL", "https://staging.example.com")
    monkeypatch.setenv("NAILAPI_TIMEOUT", "2.5")

    settings = ApiSettings()

    assert settings.base_url == "https://staging.example.com"
    assert settings.timeout == 2.5


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        ApiSettings(timeout=0)
