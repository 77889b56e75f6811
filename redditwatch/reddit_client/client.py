"""Synchronous Reddit API transport built on requests."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import config
from .auth import TokenProvider
from .exceptions import error_for_status

logger = logging.getLogger(__name__)


class RedditClient:
    """HTTP client for Reddit's OAuth API with retrying transport."""

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: str = config.OAUTH_BASE_URL,
        timeout: int = config.TIMEOUT,
        user_agent: str = config.USER_AGENT,
        max_retries: int = config.MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Reddit API client.

        Args:
            token_provider: Source of bearer tokens
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            max_retries: Transport-level retries on 429/5xx
            session: Pre-built session (tests inject one)
        """
        self.token_provider = token_provider
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # Setup session with retries
        self.session = session or requests.Session()
        retries = Retry(
            total=max_retries,
            backoff_factor=config.RETRY_BACKOFF,
            status_forcelist=config.RETRY_STATUSES,
            allowed_methods=None,
            raise_on_status=False,
        )
        self.session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session.headers.update({"User-Agent": user_agent})

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Make an authenticated request, retrying once with a fresh token on HTTP 401."""
        kwargs.setdefault("timeout", self.timeout)
        url = self._url(path)

        for attempt in range(2):
            headers = dict(kwargs.pop("headers", None) or {})
            headers["Authorization"] = f"bearer {self.token_provider.get_token()}"
            response = self.session.request(method, url, headers=headers, **kwargs)

            if response.status_code == 401 and attempt == 0:
                logger.info("HTTP 401 from %s %s; refreshing token and retrying", method.upper(), path)
                self.token_provider.invalidate()
                continue

            if response.status_code >= 400:
                logger.warning("%s %s failed with HTTP %s", method.upper(), path, response.status_code)
                raise error_for_status(
                    response.status_code,
                    f"{method.upper()} {path} failed with HTTP {response.status_code}",
                    response_body=response.text,
                )
            return response

        # Unreachable: the second 401 falls through to the status check above.
        raise RuntimeError("Unreachable code")

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return {}
        return response.json()

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        return self._decode(self._request("get", path, params=_clean(params)))

    def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        """POST form ``data`` to ``path`` and return the decoded JSON body."""
        return self._decode(self._request("post", path, data=_clean(data)))

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """DELETE ``path`` and return the decoded JSON body."""
        return self._decode(self._request("delete", path, params=_clean(params)))

    def close(self) -> None:
        self.session.close()


def _clean(values: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop ``None``/empty-string values and render booleans the way Reddit expects."""
    if values is None:
        return None
    cleaned = {}
    for name, value in values.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[name] = value
    return cleaned
