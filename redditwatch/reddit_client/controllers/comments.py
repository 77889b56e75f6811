"""Comments-on-a-post feed controller."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..listing import flatten_comments, parse_comment_tree
from ..snapshot import Snapshot
from ..things import Comment, MoreContainer
from .base import FeedController

logger = logging.getLogger(__name__)


class CommentSort(Enum):
    CONFIDENCE = "confidence"
    TOP = "top"
    NEW = "new"
    CONTROVERSIAL = "controversial"
    OLD = "old"
    QA = "qa"
    LIVE = "live"


class Comments(FeedController):
    """
    The comment tree of one post, one cached feed per sort order.

    Feeds are flattened depth-first, so a monitor on ``new`` reports replies
    at any depth, not just top-level comments.
    """

    feed_type = CommentSort

    def __init__(
        self,
        dispatch,
        post_id: str,
        subreddit: Optional[str] = None,
        limit: Optional[int] = None,
        depth: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        # Set before the base class builds monitor keys from them.
        self.post_id = post_id[3:] if post_id and post_id.startswith("t3_") else post_id
        self.subreddit = subreddit
        self.limit = limit
        self.depth = depth
        self.more_containers: Dict[CommentSort, List[MoreContainer]] = {}
        super().__init__(dispatch, clock=clock)

    @property
    def monitor_scope(self) -> str:
        return self.post_id or ""

    def _fetcher(self, feed: CommentSort) -> Callable[[], List[Comment]]:
        return lambda: self._fetch_comments(feed)

    def _path(self) -> str:
        if self.subreddit:
            return f"/r/{self.subreddit}/comments/{self.post_id}"
        return f"/comments/{self.post_id}"

    def _fetch_comments(
        self,
        sort: CommentSort,
        limit: Optional[int] = None,
        depth: Optional[int] = None,
        context: Optional[int] = None,
        comment: Optional[str] = None,
        show_edits: bool = False,
        show_more: bool = True,
        threaded: bool = True,
    ) -> List[Comment]:
        params: Dict[str, Any] = {
            "sort": sort.value,
            "limit": limit if limit is not None else self.limit,
            "depth": depth if depth is not None else self.depth,
            "context": context,
            "comment": comment,
            "showedits": show_edits,
            "showmore": show_more,
            "threaded": threaded,
        }
        payload = self.dispatch.get(self._path(), params)

        # The endpoint answers with [post listing, comment listing].
        if not isinstance(payload, list) or len(payload) < 2:
            logger.warning("Unexpected comments payload for post %s", self.post_id)
            return []

        children = payload[1].get("data", {}).get("children", [])
        comments, more = parse_comment_tree(children)
        self.more_containers[sort] = more
        return flatten_comments(comments)

    def get_comments(self, sort: Any = CommentSort.CONFIDENCE, **params: Any) -> List[Comment]:
        """
        Fetch the comment tree in ``sort`` order, flattened, and refresh that feed's cache.

        Args:
            sort: A CommentSort or its string value
            **params: limit, depth, context, comment, show_edits, show_more, threaded
        """
        binding = self.resolve_feed(sort)
        comments = self._fetch_comments(binding.feed, **params)
        self._store(binding.feed, comments)
        return comments

    @property
    def confidence(self) -> Snapshot:
        return self.get(CommentSort.CONFIDENCE)

    @property
    def top(self) -> Snapshot:
        return self.get(CommentSort.TOP)

    @property
    def new(self) -> Snapshot:
        return self.get(CommentSort.NEW)

    @property
    def controversial(self) -> Snapshot:
        return self.get(CommentSort.CONTROVERSIAL)

    @property
    def old(self) -> Snapshot:
        return self.get(CommentSort.OLD)

    @property
    def qa(self) -> Snapshot:
        return self.get(CommentSort.QA)

    @property
    def live(self) -> Snapshot:
        return self.get(CommentSort.LIVE)

    def monitor_new(self) -> bool:
        return self.start_monitoring(CommentSort.NEW)
