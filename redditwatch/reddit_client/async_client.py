"""Async Reddit API transport using aiohttp."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from . import config
from .auth import TokenProvider
from .client import _clean
from .exceptions import error_for_status

logger = logging.getLogger(__name__)


def _as_strings(values: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    """aiohttp wants plain strings in query strings and form bodies."""
    cleaned = _clean(values)
    if cleaned is None:
        return None
    return {name: str(value) for name, value in cleaned.items()}


class AsyncRedditClient:
    """Async HTTP client for Reddit's OAuth API."""

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: str = config.OAUTH_BASE_URL,
        timeout: int = config.TIMEOUT,
        user_agent: str = config.USER_AGENT,
    ):
        self.token_provider = token_provider
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        session = await self._get_session()
        url = path if path.startswith("https://") else f"{self.base_url}/{path.lstrip('/')}"

        for attempt in range(2):
            # Token refresh is a blocking requests call; keep it off the event loop.
            token = await asyncio.to_thread(self.token_provider.get_token)
            headers = {"Authorization": f"bearer {token}"}
            async with session.request(method, url, params=params, data=data, headers=headers) as resp:
                if resp.status == 401 and attempt == 0:
                    logger.info("HTTP 401 from %s %s; refreshing token and retrying", method.upper(), path)
                    self.token_provider.invalidate()
                    continue
                if resp.status >= 400:
                    body = await resp.text()
                    logger.warning("%s %s failed with HTTP %s", method.upper(), path, resp.status)
                    raise error_for_status(
                        resp.status,
                        f"{method.upper()} {path} failed with HTTP {resp.status}",
                        response_body=body,
                    )
                text = await resp.text()
                if not text:
                    return {}
                return await resp.json(content_type=None)

        raise RuntimeError("Unreachable code")

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=_as_strings(params))

    async def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, data=_as_strings(data))

    async def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("DELETE", path, params=_as_strings(params))
