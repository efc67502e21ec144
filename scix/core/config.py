"""Client configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from scix.core.constants import DEFAULT_BASE_URL, DEFAULT_RATE_LIMIT, DEFAULT_TIMEOUT_SECONDS
from scix.core.errors import ConfigurationError

load_dotenv()

TOKEN_ENV_VARS = ("SCIX_API_TOKEN", "ADS_API_TOKEN")


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def resolve_token(token: str | None = None) -> str:
    """Return the explicit token, else the first non-empty token env var."""
    if token:
        return token
    for name in TOKEN_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    raise ConfigurationError(
        "no API token: set SCIX_API_TOKEN (or ADS_API_TOKEN) or pass --token"
    )


@dataclass(frozen=True)
class ClientConfig:
    api_token: str
    base_url: str = DEFAULT_BASE_URL
    rate_limit: float = DEFAULT_RATE_LIMIT
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.api_token:
            raise ConfigurationError("API token must be a non-empty string")
        if self.rate_limit <= 0:
            raise ConfigurationError(f"rate limit must be > 0, got {self.rate_limit}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout}")

    @classmethod
    def from_env(cls, token: str | None = None) -> ClientConfig:
        """Build a config from SCIX_* environment variables (and a .env file)."""
        base_url = os.getenv("SCIX_BASE_URL") or DEFAULT_BASE_URL
        return cls(
            api_token=resolve_token(token),
            base_url=base_url.rstrip("/"),
            rate_limit=_float_from_env("SCIX_RATE_LIMIT", DEFAULT_RATE_LIMIT),
            timeout=_float_from_env("SCIX_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        )
