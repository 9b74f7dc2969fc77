"""Environment-driven settings for the iTransact connector."""

import os
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, SecretStr

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LIVE_URL = "https://api.itransact.com"
TEST_URL = "https://test.api.itransact.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RATE_LIMIT = "60/minute"

_TRUTHY = frozenset(["1", "true", "yes", "on"])


class ItransactSettings(BaseModel):
    """Immutable connector settings resolved from arguments and environment."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    api_secret: Optional[SecretStr] = None
    test_mode: bool = False
    timeout: float = DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        return TEST_URL if self.test_mode else LIVE_URL


def parse_bool(value: Optional[str]) -> bool:
    """Interpret an environment flag such as ``ITRANSACT_TEST_MODE``."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def parse_timeout(value: Optional[str]) -> float:
    """Parse ``ITRANSACT_TIMEOUT`` into seconds.

    Raises:
        ConfigurationError: If the value is not a positive number.
    """
    if value is None or value.strip() == "":
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError as e:
        raise ConfigurationError(f"ITRANSACT_TIMEOUT must be a number, got {value!r}") from e
    if timeout <= 0:
        raise ConfigurationError("ITRANSACT_TIMEOUT must be greater than zero")
    return timeout


def load_settings(
    api_key: Optional[str] = None,
    api_secret: Optional[str] = None,
    test_mode: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> ItransactSettings:
    """Build settings, preferring explicit arguments over the environment.

    Args:
        api_key: iTransact API access username. Falls back to ITRANSACT_API_KEY.
        api_secret: iTransact API access key. Falls back to ITRANSACT_API_SECRET.
        test_mode: Use the test endpoint. Falls back to ITRANSACT_TEST_MODE.
        timeout: Request timeout in seconds. Falls back to ITRANSACT_TIMEOUT.

    Returns:
        Resolved ItransactSettings. Credentials may still be None here;
        the connector decides whether they are required.
    """
    if test_mode is None:
        test_mode = parse_bool(os.getenv("ITRANSACT_TEST_MODE"))
    if timeout is None:
        timeout = parse_timeout(os.getenv("ITRANSACT_TIMEOUT"))
    elif timeout <= 0:
        raise ConfigurationError("timeout must be greater than zero")

    secret = api_secret or os.getenv("ITRANSACT_API_SECRET") or None
    return ItransactSettings(
        api_key=api_key or os.getenv("ITRANSACT_API_KEY") or None,
        api_secret=SecretStr(secret) if secret else None,
        test_mode=test_mode,
        timeout=timeout,
    )


def load_api_token() -> Optional[str]:
    """Bearer token guarding the reference API (``API_KEY``)."""
    return os.getenv("API_KEY") or None


def load_rate_limit() -> str:
    """Per-client rate limit for the reference API, in slowapi notation."""
    return os.getenv("API_RATE_LIMIT", DEFAULT_RATE_LIMIT)
