"""The handle shared by every controller: transports plus the monitor registry."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from . import config
from .async_client import AsyncRedditClient
from .auth import TokenProvider
from .client import RedditClient
from .monitoring import MonitorRegistry

logger = logging.getLogger(__name__)


class Dispatch:
    """
    Routes controller calls to the sync or async transport.

    The async transport is only built the first time an ``*_async`` method
    needs it, so purely synchronous users never open an aiohttp session.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        user_agent: str = config.USER_AGENT,
        timeout: int = config.TIMEOUT,
        client: Optional[RedditClient] = None,
        async_client: Optional[AsyncRedditClient] = None,
        registry: Optional[MonitorRegistry] = None,
        monitoring_delay: float = config.MONITORING_WAIT_DELAY,
    ):
        self.token_provider = token_provider
        self.user_agent = user_agent
        self.timeout = timeout
        self.client = client or RedditClient(token_provider, timeout=timeout, user_agent=user_agent)
        self._async_client = async_client
        self._async_lock = threading.Lock()
        self.registry = registry or MonitorRegistry()
        self.monitoring_delay = monitoring_delay

    @property
    def async_client(self) -> AsyncRedditClient:
        with self._async_lock:
            if self._async_client is None:
                self._async_client = AsyncRedditClient(
                    self.token_provider,
                    timeout=self.timeout,
                    user_agent=self.user_agent,
                )
            return self._async_client

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(path, params)

    def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.post(path, data)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.delete(path, params)

    async def get_async(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.async_client.get(path, params)

    async def post_async(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.async_client.post(path, data)

    async def delete_async(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.async_client.delete(path, params)

    def close(self, join_timeout: Optional[float] = None) -> None:
        """
        Stop every monitor, then close the sync transport.

        The aiohttp session behind the ``*_async`` methods needs an event
        loop to close, so callers that used them must also await ``aclose()``.
        """
        for loop in self.registry.stop_all():
            loop.join(join_timeout)
        self.client.close()
        if self._async_client is not None and not self._async_client.closed:
            logger.warning("Async session still open after close(); await aclose() to release it")

    async def aclose(self) -> None:
        if self._async_client is not None:
            await self._async_client.close()
