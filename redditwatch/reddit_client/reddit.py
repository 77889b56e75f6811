"""Entry point object tying credentials, transports and controllers together."""

from __future__ import annotations

import logging
from typing import Optional

from . import config
from .auth import Credentials, TokenProvider, token_provider_for
from .controllers import Comment, Post, PrivateMessages, Subreddit, User
from .dispatch import Dispatch

logger = logging.getLogger(__name__)


class Reddit:
    """
    Authenticated Reddit session.

    Example:
        reddit = Reddit.from_env()
        for message in reddit.private_messages.inbox:
            print(message.subject)
        reddit.close()
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: int = config.TIMEOUT,
        monitoring_delay: float = config.MONITORING_WAIT_DELAY,
        dispatch: Optional[Dispatch] = None,
    ):
        if dispatch is None:
            if token_provider is None:
                if credentials is None:
                    raise ValueError("Reddit needs credentials, a token provider or a dispatch")
                token_provider = token_provider_for(credentials)
            user_agent = credentials.user_agent if credentials else config.USER_AGENT
            dispatch = Dispatch(
                token_provider,
                user_agent=user_agent,
                timeout=timeout,
                monitoring_delay=monitoring_delay,
            )
        self.dispatch = dispatch
        self._private_messages: Optional[PrivateMessages] = None

    @classmethod
    def from_env(cls, **kwargs) -> "Reddit":
        return cls(Credentials.from_env(), **kwargs)

    @property
    def private_messages(self) -> PrivateMessages:
        if self._private_messages is None:
            self._private_messages = PrivateMessages(self.dispatch)
        return self._private_messages

    def subreddit(self, name: str) -> Subreddit:
        return Subreddit(self.dispatch, name)

    def post(self, fullname: str, subreddit: Optional[str] = None) -> Post:
        if not fullname.startswith("t3_"):
            fullname = f"t3_{fullname}"
        return Post(self.dispatch, fullname=fullname, subreddit=subreddit)

    def comment(self, fullname: str, subreddit: Optional[str] = None) -> Comment:
        if not fullname.startswith("t1_"):
            fullname = f"t1_{fullname}"
        return Comment(self.dispatch, subreddit=subreddit, fullname=fullname, id=fullname[3:])

    def user(self, name: str) -> User:
        return User(self.dispatch, name)

    def close(self, join_timeout: Optional[float] = None) -> None:
        """Stop all monitors and close the sync transport. Await ``aclose()`` too after any ``*_async`` call."""
        self.dispatch.close(join_timeout)

    async def aclose(self) -> None:
        await self.dispatch.aclose()

    def __enter__(self) -> "Reddit":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
