"""Controller base classes: response validation, feed caches and monitoring."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from .. import config
from ..events import ChangeEvent, EventHook, Listener
from ..exceptions import RedditControllerException, RedditValidationError
from ..monitoring import PollLoop
from ..snapshot import CacheEntry, Snapshot, diff, make_snapshot

logger = logging.getLogger(__name__)


def response_things(response: Any) -> List[Dict[str, Any]]:
    """The ``json.data.things`` children of an ``api_type=json`` response."""
    if not isinstance(response, dict):
        return []
    json_body = response.get("json")
    if not isinstance(json_body, dict):
        return []
    data = json_body.get("data")
    if not isinstance(data, dict):
        return []
    return data.get("things") or []


class BaseController:
    """Holds the dispatch handle and the helpers every controller shares."""

    def __init__(self, dispatch):
        self.dispatch = dispatch

    @staticmethod
    def validate(response: Any) -> Any:
        """Raise if Reddit reported errors inside an otherwise successful response."""
        if response is None:
            raise RedditControllerException("Reddit returned an empty response.")
        if isinstance(response, dict):
            json_body = response.get("json")
            errors = json_body.get("errors") if isinstance(json_body, dict) else None
            if errors:
                messages = []
                for error in errors:
                    if isinstance(error, (list, tuple)) and len(error) > 1:
                        messages.append(f"{error[0]}: {error[1]}")
                    else:
                        messages.append(str(error))
                raise RedditValidationError("; ".join(messages), errors=errors)
        return response

    def _action(self, path: str, **data: Any) -> Any:
        return self.validate(self.dispatch.post(path, data))

    async def _action_async(self, path: str, **data: Any) -> Any:
        return self.validate(await self.dispatch.post_async(path, data))


class FeedCache:
    """
    Latest snapshot of one feed and when it was taken.

    Readers and the poll loop only ever exchange whole ``CacheEntry``
    objects, so a snapshot is never seen with another snapshot's timestamp.
    """

    def __init__(self, freshness: float = config.CACHE_FRESHNESS_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.freshness = freshness
        self._clock = clock
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    @property
    def snapshot(self) -> Snapshot:
        entry = self._entry
        return entry.snapshot if entry is not None else ()

    @property
    def last_updated(self) -> Optional[float]:
        entry = self._entry
        return entry.last_updated if entry is not None else None

    def is_fresh(self) -> bool:
        entry = self._entry
        return entry is not None and self._clock() - entry.last_updated < self.freshness

    def publish(self, records: Iterable[Any]) -> CacheEntry:
        entry = CacheEntry(make_snapshot(records), self._clock())
        self._entry = entry
        return entry


@dataclass
class FeedBinding:
    """Everything a feed needs, resolved once when the controller is built."""

    feed: Enum
    key: str
    fetch: Callable[[], Iterable[Any]]
    cache: FeedCache
    hook: EventHook


class FeedController(BaseController):
    """
    Controller that caches feeds and can monitor them for changes.

    Subclasses set ``feed_type`` to a string-valued Enum and implement
    ``_fetcher`` returning the fetch callable for each member.
    """

    feed_type: Type[Enum]

    def __init__(self, dispatch, clock: Callable[[], float] = time.monotonic):
        super().__init__(dispatch)
        self._clock = clock
        self._bindings: Dict[Enum, FeedBinding] = {}
        for feed in self.feed_type:
            key = self.monitor_key(feed)
            self._bindings[feed] = FeedBinding(
                feed=feed,
                key=key,
                fetch=self._fetcher(feed),
                cache=FeedCache(clock=clock),
                hook=EventHook(key),
            )

    @property
    def monitor_scope(self) -> str:
        """Distinguishes controllers of the same type (a post id, a subreddit name)."""
        return ""

    def monitor_key(self, feed: Enum) -> str:
        return f"{type(self).__name__}{self.monitor_scope}{feed.name.title()}"

    def _fetcher(self, feed: Enum) -> Callable[[], Iterable[Any]]:
        raise NotImplementedError

    def resolve_feed(self, feed: Any) -> FeedBinding:
        """Map an Enum member or its string value to its binding."""
        if not isinstance(feed, self.feed_type):
            try:
                feed = self.feed_type(str(feed).lower())
            except ValueError:
                raise RedditControllerException(f"Unrecognized feed '{feed}'.") from None
        return self._bindings[feed]

    def _store(self, feed: Any, records: Iterable[Any]) -> Snapshot:
        return self.resolve_feed(feed).cache.publish(records).snapshot

    def get(self, feed: Any) -> Snapshot:
        """Cached snapshot if still fresh, otherwise a synchronous refetch."""
        binding = self.resolve_feed(feed)
        entry = binding.cache.entry
        if entry is not None and binding.cache.is_fresh():
            return entry.snapshot
        return self.refresh(binding.feed)

    def refresh(self, feed: Any) -> Snapshot:
        binding = self.resolve_feed(feed)
        return binding.cache.publish(binding.fetch()).snapshot

    def last_updated(self, feed: Any) -> Optional[float]:
        return self.resolve_feed(feed).cache.last_updated

    def on_change(self, feed: Any, listener: Listener) -> None:
        self.resolve_feed(feed).hook.add(listener)

    def remove_listener(self, feed: Any, listener: Listener) -> bool:
        return self.resolve_feed(feed).hook.remove(listener)

    def poll(self, feed: Any) -> bool:
        """
        Run one monitoring cycle for ``feed``.

        Fetches, diffs against the cached snapshot, publishes the new
        snapshot and fires a ChangeEvent when anything was added or removed.
        Returns whether the feed changed.
        """
        binding = self.resolve_feed(feed)
        old = binding.cache.snapshot
        new = binding.cache.publish(binding.fetch()).snapshot

        changed, added, removed = diff(old, new)
        if changed:
            logger.debug("%s: %d added, %d removed", binding.key, len(added), len(removed))
            errors = binding.hook.fire(ChangeEvent(binding.feed, old, new, tuple(added), tuple(removed)))
            if errors:
                logger.warning("%d listener(s) failed for %s", len(errors), binding.key)
        return changed

    def start_monitoring(self, feed: Any, start_delay: float = 0.0) -> bool:
        """
        Start polling ``feed`` in the background.

        Returns False if it was already being monitored. Raises
        RedditControllerException for a feed this controller does not have.
        """
        binding = self.resolve_feed(feed)
        registry = self.dispatch.registry
        feed_name = binding.feed.value

        def build_loop(stop_event):
            return PollLoop(
                registry,
                binding.key,
                feed_name,
                lambda: self.poll(binding.feed),
                base_delay=self.dispatch.monitoring_delay,
                start_delay=start_delay,
                stop_event=stop_event,
            )

        return registry.start(binding.key, feed_name, build_loop)

    def stop_monitoring(self, feed: Any) -> bool:
        binding = self.resolve_feed(feed)
        return self.dispatch.registry.stop(binding.key, binding.feed.value)

    def is_monitoring(self, feed: Any) -> bool:
        binding = self.resolve_feed(feed)
        return self.dispatch.registry.is_active(binding.key, binding.feed.value)

    def monitor_all(self, stagger: float = 0.0) -> Dict[Enum, bool]:
        """Start every feed, optionally spacing the first polls ``stagger`` seconds apart."""
        return {
            feed: self.start_monitoring(feed, start_delay=index * stagger)
            for index, feed in enumerate(self.feed_type)
        }

    def stop_all_monitoring(self) -> Dict[Enum, bool]:
        return {feed: self.stop_monitoring(feed) for feed in self.feed_type}


class ThingController(BaseController):
    """Actions shared by posts and comments, addressed by ``fullname``."""

    fullname: Optional[str] = None
    subreddit: Optional[str] = None

    def _require_fullname(self) -> str:
        if not self.fullname:
            raise RedditControllerException(f"{type(self).__name__} has no fullname; submit or load it first.")
        return self.fullname

    def _vote(self, direction: int) -> None:
        self._action("/api/vote", id=self._require_fullname(), dir=direction)

    async def _vote_async(self, direction: int) -> None:
        await self._action_async("/api/vote", id=self._require_fullname(), dir=direction)

    def upvote(self) -> None:
        self._vote(1)

    async def upvote_async(self) -> None:
        await self._vote_async(1)

    def downvote(self) -> None:
        self._vote(-1)

    async def downvote_async(self) -> None:
        await self._vote_async(-1)

    def unvote(self) -> None:
        self._vote(0)

    async def unvote_async(self) -> None:
        await self._vote_async(0)

    def delete(self) -> None:
        self._action("/api/del", id=self._require_fullname())

    async def delete_async(self) -> None:
        await self._action_async("/api/del", id=self._require_fullname())

    def save(self, category: str = "") -> None:
        self._action("/api/save", id=self._require_fullname(), category=category)

    async def save_async(self, category: str = "") -> None:
        await self._action_async("/api/save", id=self._require_fullname(), category=category)

    def unsave(self) -> None:
        self._action("/api/unsave", id=self._require_fullname())

    async def unsave_async(self) -> None:
        await self._action_async("/api/unsave", id=self._require_fullname())

    def lock(self) -> None:
        self._action("/api/lock", id=self._require_fullname())

    async def lock_async(self) -> None:
        await self._action_async("/api/lock", id=self._require_fullname())

    def unlock(self) -> None:
        self._action("/api/unlock", id=self._require_fullname())

    async def unlock_async(self) -> None:
        await self._action_async("/api/unlock", id=self._require_fullname())

    def remove(self, spam: bool = False) -> None:
        """Moderator removal; ``spam`` also trains the subreddit's spam filter."""
        self._action("/api/remove", id=self._require_fullname(), spam=spam)

    async def remove_async(self, spam: bool = False) -> None:
        await self._action_async("/api/remove", id=self._require_fullname(), spam=spam)

    def approve(self) -> None:
        self._action("/api/approve", id=self._require_fullname())

    async def approve_async(self) -> None:
        await self._action_async("/api/approve", id=self._require_fullname())

    def enable_send_replies(self) -> None:
        self._action("/api/sendreplies", id=self._require_fullname(), state=True)

    async def enable_send_replies_async(self) -> None:
        await self._action_async("/api/sendreplies", id=self._require_fullname(), state=True)

    def disable_send_replies(self) -> None:
        self._action("/api/sendreplies", id=self._require_fullname(), state=False)

    async def disable_send_replies_async(self) -> None:
        await self._action_async("/api/sendreplies", id=self._require_fullname(), state=False)

    def _report_data(
        self,
        reason: str = "",
        other_reason: str = "",
        rule_reason: str = "",
        site_reason: str = "",
        custom_text: str = "",
        additional_info: str = "",
        ban_evading_accounts_names: str = "",
        from_help_center: bool = False,
        violator_username: str = "",
    ) -> Dict[str, Any]:
        return {
            "api_type": "json",
            "thing_id": self._require_fullname(),
            "sr_name": self.subreddit,
            "reason": reason,
            "other_reason": other_reason,
            "rule_reason": rule_reason,
            "site_reason": site_reason,
            "custom_text": custom_text,
            "additional_info": additional_info,
            "ban_evading_accounts_names": ban_evading_accounts_names,
            "from_help_center": from_help_center,
            "violator_username": violator_username,
        }

    def report(self, reason: str = "", **kwargs: Any) -> None:
        """Report to the subreddit moderators. Extra keywords match Reddit's report form fields."""
        self._action("/api/report", **self._report_data(reason, **kwargs))

    async def report_async(self, reason: str = "", **kwargs: Any) -> None:
        await self._action_async("/api/report", **self._report_data(reason, **kwargs))
