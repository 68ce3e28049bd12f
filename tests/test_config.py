import pytest
from pydantic import ValidationError

from reelbridge.core.config import Settings, get_settings
from reelbridge.providers.base import ProviderConfig


def test_defaults(monkeypatch):
    monkeypatch.delenv("PROXY", raising=False)

    settings = Settings(tmdb_api_key="key")

    assert settings.catalog_base_url == "https://asianc.co"
    assert settings.request_timeout == 10
    assert settings.proxy is None
    assert settings.debug is False


@pytest.mark.parametrize(
    "proxy", ["http://127.0.0.1:8080", "socks5://proxy.local:1080"]
)
def test_valid_proxy(proxy):
    assert Settings(tmdb_api_key="key", proxy=proxy).proxy == proxy


@pytest.mark.parametrize("proxy", ["ftp://host:21", "http://"])
def test_invalid_proxy(proxy):
    with pytest.raises(ValidationError):
        Settings(tmdb_api_key="key", proxy=proxy)


def test_catalog_base_url_trailing_slash_is_stripped():
    settings = Settings(tmdb_api_key="key", catalog_base_url="https://catalog.test/")

    assert settings.catalog_base_url == "https://catalog.test"


def test_provider_config_from_settings(monkeypatch):
    monkeypatch.setenv("PROXY", "http://127.0.0.1:8080")
    monkeypatch.setenv("REQUEST_TIMEOUT", "30")
    get_settings.cache_clear()

    config = ProviderConfig.from_settings()

    assert config.base_url == "https://asianc.co"
    assert config.proxy == "http://127.0.0.1:8080"
    assert config.timeout == 30
    assert config.session is None
    assert "User-Agent" in config.headers
