"""Subreddit controllers: metadata, search, submissions and post feeds."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .. import config, things
from ..exceptions import RedditControllerException
from ..listing import paginate, paginate_async, parse_listing
from ..snapshot import Snapshot
from .base import BaseController, FeedController
from .emoji import Emoji

logger = logging.getLogger(__name__)


class PostSort(Enum):
    NEW = "new"
    HOT = "hot"
    RISING = "rising"
    TOP = "top"
    CONTROVERSIAL = "controversial"


class SubredditPosts(FeedController):
    """
    Post listings of one subreddit, one cached feed per sort.

    Example:
        posts = reddit.subreddit("python").posts
        posts.on_change("new", lambda event: print(event.added))
        posts.monitor_new()
    """

    feed_type = PostSort

    def __init__(
        self,
        dispatch,
        subreddit: str,
        limit: int = config.DEFAULT_LIMIT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.subreddit = subreddit
        self.limit = limit
        super().__init__(dispatch, clock=clock)

    @property
    def monitor_scope(self) -> str:
        return self.subreddit

    def _fetcher(self, feed: PostSort) -> Callable[[], List[things.Post]]:
        return lambda: self._fetch_posts(feed)

    def _fetch_posts(
        self,
        sort: PostSort,
        limit: Optional[int] = None,
        after: str = "",
        before: str = "",
        t: str = "",
    ) -> List[things.Post]:
        params: Dict[str, Any] = {
            "limit": min(limit or self.limit, config.MAX_LIMIT),
            "after": after,
            "before": before,
            "t": t,
        }
        payload = self.dispatch.get(f"/r/{self.subreddit}/{sort.value}", params)
        return [thing for thing in parse_listing(payload).things if isinstance(thing, things.Post)]

    def get_posts(self, sort: Any = PostSort.NEW, **params: Any) -> List[things.Post]:
        """
        Fetch one page of posts and refresh that feed's cache.

        Args:
            sort: A PostSort or its string value
            **params: limit (max 100), after, before, t (time filter for top/controversial)
        """
        binding = self.resolve_feed(sort)
        posts = self._fetch_posts(binding.feed, **params)
        self._store(binding.feed, posts)
        return posts

    @property
    def new(self) -> Snapshot:
        return self.get(PostSort.NEW)

    @property
    def hot(self) -> Snapshot:
        return self.get(PostSort.HOT)

    @property
    def rising(self) -> Snapshot:
        return self.get(PostSort.RISING)

    @property
    def top(self) -> Snapshot:
        return self.get(PostSort.TOP)

    @property
    def controversial(self) -> Snapshot:
        return self.get(PostSort.CONTROVERSIAL)

    def monitor_new(self) -> bool:
        return self.start_monitoring(PostSort.NEW)

    def monitor_hot(self) -> bool:
        return self.start_monitoring(PostSort.HOT)


class Subreddit(BaseController):
    """A subreddit by name."""

    def __init__(self, dispatch, name: str):
        super().__init__(dispatch)
        self.name = name[2:] if name.startswith("r/") else name
        self._posts: Optional[SubredditPosts] = None
        self._emoji: Optional[Emoji] = None

    def __repr__(self) -> str:
        return f"Subreddit(name={self.name!r})"

    @property
    def posts(self) -> SubredditPosts:
        if self._posts is None:
            self._posts = SubredditPosts(self.dispatch, self.name)
        return self._posts

    @property
    def emoji(self) -> Emoji:
        if self._emoji is None:
            self._emoji = Emoji(self.dispatch, self.name)
        return self._emoji

    def about(self) -> things.Subreddit:
        page = parse_listing({"data": {"children": [self.dispatch.get(f"/r/{self.name}/about")]}})
        if not page.things or not isinstance(page.things[0], things.Subreddit):
            raise RedditControllerException("Unable to retrieve subreddit data.")
        return page.things[0]

    def _search_params(self, query: str, sort: str, t: str) -> Dict[str, Any]:
        return {"q": query, "sort": sort, "t": t, "restrict_sr": True, "type": "link"}

    def search(
        self,
        query: str,
        limit: int = config.MAX_LIMIT,
        sort: str = "relevance",
        t: str = "all",
        verbose: bool = False,
    ) -> List[things.Post]:
        """
        Search posts in this subreddit across as many pages as needed.

        Args:
            query: Search query
            limit: Max posts to return
            sort: relevance, hot, top, new or comments
            t: hour, day, week, month, year or all
            verbose: Show a progress bar

        Returns:
            Unique posts in result order
        """
        results = paginate(
            self.dispatch,
            f"/r/{self.name}/search",
            self._search_params(query, sort, t),
            limit=limit,
            verbose=verbose,
        )
        logger.info("Search %r in r/%s returned %d posts", query, self.name, len(results))
        return [thing for thing in results if isinstance(thing, things.Post)]

    async def search_async(
        self,
        query: str,
        limit: int = config.MAX_LIMIT,
        sort: str = "relevance",
        t: str = "all",
        verbose: bool = False,
    ) -> List[things.Post]:
        results = await paginate_async(
            self.dispatch,
            f"/r/{self.name}/search",
            self._search_params(query, sort, t),
            limit=limit,
            verbose=verbose,
        )
        return [thing for thing in results if isinstance(thing, things.Post)]

    def autocomplete(
        self, query: Optional[str] = None, include_over_18: bool = False, include_profiles: bool = False
    ) -> things.SubredditAutocompleteResultContainer:
        """Subreddit names starting with ``query`` (defaults to this subreddit's name)."""
        response = self.dispatch.get(
            "/api/subreddit_autocomplete",
            {
                "query": query or self.name,
                "include_over_18": include_over_18,
                "include_profiles": include_profiles,
            },
        )
        return things.SubredditAutocompleteResultContainer.from_dict(response if isinstance(response, dict) else {})

    def _submit(self, kind: str, title: str, **fields: Any) -> Dict[str, Any]:
        response = self._action(
            "/api/submit",
            api_type="json",
            sr=self.name,
            kind=kind,
            title=title,
            **fields,
        )
        return response.get("json", {}).get("data", {}) if isinstance(response, dict) else {}

    def submit_self_post(
        self, title: str, text: str = "", nsfw: bool = False, spoiler: bool = False, send_replies: bool = True
    ) -> Dict[str, Any]:
        """
        Submit a text post.

        Returns:
            Reddit's ``json.data`` block (``id``, ``name`` and ``url`` of the new post)
        """
        return self._submit("self", title, text=text, nsfw=nsfw, spoiler=spoiler, sendreplies=send_replies)

    def submit_link_post(
        self,
        title: str,
        url: str,
        resubmit: bool = False,
        nsfw: bool = False,
        spoiler: bool = False,
        send_replies: bool = True,
    ) -> Dict[str, Any]:
        return self._submit(
            "link", title, url=url, resubmit=resubmit, nsfw=nsfw, spoiler=spoiler, sendreplies=send_replies
        )
