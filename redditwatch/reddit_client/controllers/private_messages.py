"""Private messages controller."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List

from .. import config
from ..listing import parse_listing
from ..snapshot import Snapshot
from ..things import Message
from .base import FeedController


class MessageFeed(Enum):
    INBOX = "inbox"
    UNREAD = "unread"
    SENT = "sent"


class PrivateMessages(FeedController):
    """
    Inbox, unread and sent messages of the authenticated user.

    Example:
        messages = reddit.private_messages
        messages.on_change("inbox", lambda event: print(event.added))
        messages.monitor_inbox()
    """

    feed_type = MessageFeed

    def _fetcher(self, feed: MessageFeed) -> Callable[[], List[Message]]:
        return lambda: self._fetch_messages(feed.value)

    @staticmethod
    def _messages_params(
        mark: bool = True,
        limit: int = config.DEFAULT_LIMIT,
        after: str = "",
        before: str = "",
        show: str = "all",
        sr_detail: bool = False,
        include_categories: bool = False,
        count: int = 0,
        mid: str = "",
    ) -> Dict[str, Any]:
        return {
            "mark": mark,
            "limit": limit,
            "after": after,
            "before": before,
            "show": show,
            "sr_detail": sr_detail,
            "include_categories": include_categories,
            "count": count,
            "mid": mid,
        }

    def _fetch_messages(self, where: str, **params: Any) -> List[Message]:
        payload = self.dispatch.get(f"/message/{where}", self._messages_params(**params))
        return [thing for thing in parse_listing(payload).things if isinstance(thing, Message)]

    @property
    def inbox(self) -> Snapshot:
        return self.get(MessageFeed.INBOX)

    @property
    def unread(self) -> Snapshot:
        return self.get(MessageFeed.UNREAD)

    @property
    def sent(self) -> Snapshot:
        return self.get(MessageFeed.SENT)

    def get_messages(self, where: str, **params: Any) -> List[Message]:
        """
        Retrieve private messages for the current user and refresh that feed's cache.

        Args:
            where: One of (inbox, unread, sent)
            **params: mark, limit (max 100), after, before, show, sr_detail,
                include_categories, count, mid

        Returns:
            Messages in the order Reddit returned them
        """
        binding = self.resolve_feed(where)
        messages = self._fetch_messages(binding.feed.value, **params)
        self._store(binding.feed, messages)
        return messages

    def get_messages_inbox(self, **params: Any) -> List[Message]:
        return self.get_messages("inbox", **params)

    def get_messages_unread(self, **params: Any) -> List[Message]:
        return self.get_messages("unread", **params)

    def get_messages_sent(self, **params: Any) -> List[Message]:
        return self.get_messages("sent", **params)

    def mark_all_read(self, filter_types: str = "") -> None:
        """Queue marking every message read; Reddit answers 202 and works in the background."""
        self._action("/api/read_all_messages", filter_types=filter_types)

    async def mark_all_read_async(self, filter_types: str = "") -> None:
        await self._action_async("/api/read_all_messages", filter_types=filter_types)

    def collapse_message(self, ids: str) -> None:
        self._action("/api/collapse_message", id=ids)

    async def collapse_message_async(self, ids: str) -> None:
        await self._action_async("/api/collapse_message", id=ids)

    def uncollapse_message(self, ids: str) -> None:
        self._action("/api/uncollapse_message", id=ids)

    async def uncollapse_message_async(self, ids: str) -> None:
        await self._action_async("/api/uncollapse_message", id=ids)

    def delete_message(self, id: str) -> None:
        """Delete a message from the recipient's view of their inbox."""
        self._action("/api/del_msg", id=id)

    async def delete_message_async(self, id: str) -> None:
        await self._action_async("/api/del_msg", id=id)

    def read_message(self, ids: str) -> None:
        self._action("/api/read_message", id=ids)

    async def read_message_async(self, ids: str) -> None:
        await self._action_async("/api/read_message", id=ids)

    def unread_message(self, ids: str) -> None:
        self._action("/api/unread_message", id=ids)

    async def unread_message_async(self, ids: str) -> None:
        await self._action_async("/api/unread_message", id=ids)

    def compose(self, to: str, subject: str, text: str, from_sr: str = "") -> None:
        """Send a private message. ``subject`` is limited to 100 characters by Reddit."""
        self._action("/api/compose", api_type="json", to=to, subject=subject, text=text, from_sr=from_sr)

    async def compose_async(self, to: str, subject: str, text: str, from_sr: str = "") -> None:
        await self._action_async(
            "/api/compose", api_type="json", to=to, subject=subject, text=text, from_sr=from_sr
        )

    def monitor_inbox(self) -> bool:
        return self.start_monitoring(MessageFeed.INBOX)

    def monitor_unread(self) -> bool:
        return self.start_monitoring(MessageFeed.UNREAD)

    def monitor_sent(self) -> bool:
        return self.start_monitoring(MessageFeed.SENT)
