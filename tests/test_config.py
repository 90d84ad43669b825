# tests/test_config.py

import pytest
from pydantic import ValidationError

from config import DEFAULT_CLOUDFOUNDRY_URL, Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("CLOUDFOUNDRY_URL", "LOG_LEVEL", "PUSH_TIMEOUT", "MAX_CF_CONNECTIONS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = Settings(_env_file=None)
    assert cfg.CLOUDFOUNDRY_URL == "https://api.run.pivotal.io/"
    assert cfg.CLOUDFOUNDRY_URL == DEFAULT_CLOUDFOUNDRY_URL
    assert cfg.FLUX_SIGNIN_URL == "/signin/flux"
    assert cfg.MAX_CF_CONNECTIONS == 0
    assert cfg.SECRET_KEY


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CLOUDFOUNDRY_URL", "https://api.sys.example.com/")
    monkeypatch.setenv("log_level", "debug")
    monkeypatch.setenv("PUSH_TIMEOUT", "900")
    cfg = Settings(_env_file=None)
    assert cfg.CLOUDFOUNDRY_URL == "https://api.sys.example.com/"
    assert cfg.LOG_LEVEL == "DEBUG"
    assert cfg.PUSH_TIMEOUT == 900


def test_blank_url_rejected():
    with pytest.raises(ValidationError):
        Settings(CLOUDFOUNDRY_URL="   ", _env_file=None)


def test_non_positive_timeout_rejected():
    with pytest.raises(ValidationError):
        Settings(HTTP_TIMEOUT=0, _env_file=None)


def test_settings_are_frozen():
    cfg = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        cfg.CLOUDFOUNDRY_URL = "https://elsewhere/"
