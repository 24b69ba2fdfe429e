"""
Settings and configuration for the Havalo SDK.

Loads connection settings from environment variables and validates them
up front so a misconfigured client fails at construction time.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

__all__ = ["Settings", "create_settings_from_env"]

ENV_API_URL = "HAVALO_API_URL"
ENV_KEY = "HAVALO_KEY"
ENV_SECRET = "HAVALO_SECRET"
ENV_TIMEOUT = "HAVALO_TIMEOUT_S"

_URL_PATTERN = re.compile(r"^https?://[A-Za-z0-9.\-]+(?::[0-9]+)?(?:/.*)?$")


@dataclass(frozen=True)
class Settings:
    """
    Connection settings for a HavaloClient.

        api_url: Havalo API endpoint, e.g. https://havalo.example.com/havalo/api
        access_key: Access key identifying the caller
        secret: Shared secret used to sign requests
        request_timeout_s: HTTP request timeout in seconds
    """
    api_url: str
    access_key: str
    secret: str = field(repr=False)
    request_timeout_s: float = 30.0

    def __post_init__(self):
        if not self.api_url:
            raise ValueError("api_url is required")
        if not _URL_PATTERN.match(self.api_url):
            raise ValueError(f"Invalid api_url format: {self.api_url}")
        if not self.access_key:
            raise ValueError("access_key is required")
        if not self.secret:
            raise ValueError("secret is required")
        if self.request_timeout_s <= 0:
            raise ValueError(f"request_timeout_s must be positive, got {self.request_timeout_s}")


def create_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from HAVALO_API_URL, HAVALO_KEY, HAVALO_SECRET and the
    optional HAVALO_TIMEOUT_S.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in (ENV_API_URL, ENV_KEY, ENV_SECRET) if not env.get(name)]
    if missing:
        raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

    timeout = env.get(ENV_TIMEOUT)
    try:
        request_timeout_s = float(timeout) if timeout else 30.0
    except ValueError as ex:
        raise ValueError(f"Invalid {ENV_TIMEOUT}: {timeout}") from ex

    return Settings(
        api_url=env[ENV_API_URL],
        access_key=env[ENV_KEY],
        secret=env[ENV_SECRET],
        request_timeout_s=request_timeout_s,
    )
