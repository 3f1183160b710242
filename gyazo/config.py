"""Endpoint configuration for the Gyazo API."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "https://api.gyazo.com"
DEFAULT_UPLOAD_URL = "https://upload.gyazo.com"
DEFAULT_AUTH_URL = "https://gyazo.com/oauth/authorize"
DEFAULT_TOKEN_URL = "https://gyazo.com/oauth/token"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class GyazoConfig:
    """Base URLs and request settings shared by every client.

    Paths are fixed by the service; only the hosts are configurable so the
    clients can be pointed at a local test server.
    """

    api_url: str = DEFAULT_API_URL
    upload_url: str = DEFAULT_UPLOAD_URL
    auth_url: str = DEFAULT_AUTH_URL
    token_url: str = DEFAULT_TOKEN_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> GyazoConfig:
        """Build a config from environment variables (and a .env file).

        Returns:
            GyazoConfig with defaults for any variable that is not set

        Raises:
            ValueError: If GYAZO_TIMEOUT is not a number
        """
        _ = load_dotenv()
        timeout = os.getenv("GYAZO_TIMEOUT")
        try:
            parsed_timeout = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ValueError(f"GYAZO_TIMEOUT must be a number, got {timeout!r}") from e

        return cls(
            api_url=os.getenv("GYAZO_API_URL") or DEFAULT_API_URL,
            upload_url=os.getenv("GYAZO_UPLOAD_URL") or DEFAULT_UPLOAD_URL,
            auth_url=os.getenv("GYAZO_AUTH_URL") or DEFAULT_AUTH_URL,
            token_url=os.getenv("GYAZO_TOKEN_URL") or DEFAULT_TOKEN_URL,
            timeout=parsed_timeout,
        )

    @property
    def user_endpoint(self) -> str:
        return f"{self.api_url.rstrip('/')}/api/users/me"

    @property
    def upload_endpoint(self) -> str:
        return f"{self.upload_url.rstrip('/')}/api/upload"

    @property
    def images_endpoint(self) -> str:
        return f"{self.api_url.rstrip('/')}/api/images"

    @property
    def device_upload_endpoint(self) -> str:
        return f"{self.upload_url.rstrip('/')}/upload.cgi"
