"""Tests for environment-driven client configuration."""

import pytest

from scix.core.config import ClientConfig, resolve_token
from scix.core.constants import DEFAULT_BASE_URL
from scix.core.errors import ConfigurationError

_ENV_VARS = ("SCIX_API_TOKEN", "ADS_API_TOKEN", "SCIX_BASE_URL", "SCIX_RATE_LIMIT", "SCIX_TIMEOUT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestResolveToken:
    def test_explicit_token_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCIX_API_TOKEN", "from-env")
        assert resolve_token("explicit") == "explicit"

    def test_falls_back_to_ads_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ADS_API_TOKEN", "ads-token")
        assert resolve_token() == "ads-token"

    def test_empty_scix_token_is_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCIX_API_TOKEN", "")
        monkeypatch.setenv("ADS_API_TOKEN", "ads-token")
        assert resolve_token() == "ads-token"

    def test_missing_token_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="no API token"):
            resolve_token()


class TestClientConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCIX_API_TOKEN", "tok")

        config = ClientConfig.from_env()

        assert config.api_token == "tok"
        assert config.base_url == DEFAULT_BASE_URL
        assert config.rate_limit == 5.0
        assert config.timeout == 30.0

    def test_overrides_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCIX_API_TOKEN", "tok")
        monkeypatch.setenv("SCIX_BASE_URL", "http://localhost:8080/v1/")
        monkeypatch.setenv("SCIX_RATE_LIMIT", "2.5")
        monkeypatch.setenv("SCIX_TIMEOUT", "10")

        config = ClientConfig.from_env()

        assert config.base_url == "http://localhost:8080/v1"
        assert config.rate_limit == 2.5
        assert config.timeout == 10.0

    def test_invalid_number_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCIX_API_TOKEN", "tok")
        monkeypatch.setenv("SCIX_RATE_LIMIT", "fast")

        with pytest.raises(ConfigurationError, match="SCIX_RATE_LIMIT"):
            ClientConfig.from_env()

    def test_non_positive_rate_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            ClientConfig(api_token="tok", rate_limit=0)

    def test_empty_token_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            ClientConfig(api_token="")
