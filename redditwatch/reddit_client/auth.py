"""OAuth token providers.

Only the refresh-token grant is implemented; obtaining the refresh token in
the first place (the authorization-code flow) is left to the caller.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import requests

from . import config
from .exceptions import RedditUnauthorizedError, error_for_status

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """Application credentials plus the tokens issued to it."""

    app_id: str
    app_secret: str = ""
    refresh_token: str = ""
    access_token: str = ""
    user_agent: str = config.USER_AGENT

    @classmethod
    def from_env(cls) -> "Credentials":
        """
        Load credentials from environment variables.

        REDDIT_APP_ID is always required, together with at least one of
        REDDIT_REFRESH_TOKEN or REDDIT_ACCESS_TOKEN.

        Raises:
            ValueError: naming every missing variable
        """
        app_id = os.environ.get(config.ENV_APP_ID, "").strip()
        app_secret = os.environ.get(config.ENV_APP_SECRET, "").strip()
        refresh_token = os.environ.get(config.ENV_REFRESH_TOKEN, "").strip()
        access_token = os.environ.get(config.ENV_ACCESS_TOKEN, "").strip()
        user_agent = os.environ.get(config.ENV_USER_AGENT, "").strip() or config.USER_AGENT

        missing_vars = []
        if not app_id:
            missing_vars.append(config.ENV_APP_ID)
        if not refresh_token and not access_token:
            missing_vars.append(f"{config.ENV_REFRESH_TOKEN} or {config.ENV_ACCESS_TOKEN}")

        if missing_vars:
            logger.error("Missing Reddit credentials: %s", ", ".join(missing_vars))
            raise ValueError(f"Missing required environment variable(s): {', '.join(missing_vars)}")

        return cls(
            app_id=app_id,
            app_secret=app_secret,
            refresh_token=refresh_token,
            access_token=access_token,
            user_agent=user_agent,
        )


@runtime_checkable
class TokenProvider(Protocol):
    """Supplies bearer tokens to the transports."""

    def get_token(self) -> str:
        ...

    def invalidate(self) -> None:
        ...


class StaticTokenProvider:
    """Hands out a fixed access token; cannot recover from expiry."""

    def __init__(self, access_token: str):
        self._access_token = access_token

    def get_token(self) -> str:
        return self._access_token

    def invalidate(self) -> None:
        logger.warning("Static access token rejected; no refresh token available")


class RefreshTokenProvider:
    """Exchanges a refresh token for access tokens and caches them until expiry."""

    def __init__(
        self,
        credentials: Credentials,
        session: Optional[requests.Session] = None,
        timeout: int = config.TIMEOUT,
        clock=time.monotonic,
    ):
        if not credentials.refresh_token:
            raise ValueError("RefreshTokenProvider requires a refresh token")
        self.credentials = credentials
        self.timeout = timeout
        self._session = session or requests.Session()
        self._clock = clock
        self._lock = threading.Lock()
        self._access_token: Optional[str] = credentials.access_token or None
        # A token passed in up front has unknown age; trust it for one minute.
        self._expires_at = clock() + 60 if self._access_token else 0.0

    def get_token(self) -> str:
        with self._lock:
            if self._access_token is None or self._clock() >= self._expires_at:
                self._refresh()
            return self._access_token

    def invalidate(self) -> None:
        with self._lock:
            self._access_token = None
            self._expires_at = 0.0

    def _refresh(self) -> None:
        response = self._session.post(
            config.TOKEN_URL,
            auth=(self.credentials.app_id, self.credentials.app_secret),
            data={"grant_type": "refresh_token", "refresh_token": self.credentials.refresh_token},
            headers={"User-Agent": self.credentials.user_agent},
            timeout=self.timeout,
        )
        if response.status_code >= 400:
            raise error_for_status(
                response.status_code,
                f"Token refresh failed with HTTP {response.status_code}",
                response_body=response.text,
            )

        payload = response.json()
        token = payload.get("access_token")
        if not token:
            raise RedditUnauthorizedError(
                f"Token refresh returned no access token: {payload.get('error', 'unknown error')}",
                status_code=response.status_code,
                response_body=payload,
            )

        # Refresh a little early so in-flight requests do not race the expiry.
        expires_in = float(payload.get("expires_in", 3600))
        self._access_token = token
        self._expires_at = self._clock() + max(expires_in - 60, 0)
        logger.info("Access token refreshed (expires in %.0fs)", expires_in)


def token_provider_for(credentials: Credentials) -> TokenProvider:
    """Pick the provider matching the tokens available in ``credentials``."""
    if credentials.refresh_token:
        return RefreshTokenProvider(credentials)
    return StaticTokenProvider(credentials.access_token)
