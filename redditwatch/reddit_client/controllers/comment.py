"""Comment controller."""

from __future__ import annotations

import html
from datetime import datetime
from typing import Any, List, Optional

from .. import things
from ..exceptions import RedditControllerException
from ..listing import parse_listing
from .base import ThingController, response_things


class Comment(ThingController):
    """
    A single comment: its data plus the actions you can take on it.

    Build one from a listing record with ``Comment.from_thing`` or, for a
    new reply, with ``Post.comment()`` / ``Comment.comment()`` and then
    call ``submit()``.
    """

    def __init__(
        self,
        dispatch,
        subreddit: Optional[str] = None,
        author: Optional[str] = None,
        body: Optional[str] = None,
        parent_fullname: Optional[str] = None,
        id: Optional[str] = None,
        fullname: Optional[str] = None,
        permalink: Optional[str] = None,
        depth: int = 0,
        created: Optional[datetime] = None,
        edited: Optional[datetime] = None,
        score: int = 0,
        up_votes: int = 0,
        down_votes: int = 0,
        removed: bool = False,
        spam: bool = False,
        collapsed: bool = False,
        is_submitter: bool = False,
        replies: Optional[List["Comment"]] = None,
        listing: Optional[things.Comment] = None,
    ):
        super().__init__(dispatch)
        self.subreddit = subreddit
        self.author = author
        self.body = body
        self.parent_fullname = parent_fullname
        self.id = id
        self.fullname = fullname
        self.permalink = permalink
        self.depth = depth
        self.created = created
        self.edited = edited
        self.score = score
        self.up_votes = up_votes
        self.down_votes = down_votes
        self.removed = removed
        self.spam = spam
        self.collapsed = collapsed
        self.is_submitter = is_submitter
        self.replies = replies or []
        self.listing = listing

    @classmethod
    def from_thing(cls, dispatch, comment: things.Comment) -> "Comment":
        return cls(
            dispatch,
            subreddit=comment.subreddit,
            author=comment.author,
            body=html.unescape(comment.body) if comment.body else comment.body,
            parent_fullname=comment.parent_id,
            id=comment.id,
            fullname=comment.fullname,
            permalink=comment.permalink,
            depth=comment.depth,
            created=comment.created,
            edited=comment.edited,
            score=comment.score,
            up_votes=comment.ups,
            down_votes=comment.downs,
            removed=comment.removed,
            spam=comment.spam,
            collapsed=comment.collapsed,
            is_submitter=comment.is_submitter,
            replies=[cls.from_thing(dispatch, reply) for reply in comment.replies],
            listing=comment,
        )

    def __repr__(self) -> str:
        return f"Comment(fullname={self.fullname!r}, author={self.author!r})"

    @staticmethod
    def _from_response(dispatch, response: Any) -> "Comment":
        """Pull the first comment out of an ``api_type=json`` things response."""
        children = response_things(response)
        for thing in parse_listing({"data": {"children": children}}).things:
            if isinstance(thing, things.Comment):
                return Comment.from_thing(dispatch, thing)
        raise RedditControllerException("Reddit did not return the comment.")

    def comment(self, body: str) -> "Comment":
        """A new, unsubmitted reply to this comment."""
        return Comment(self.dispatch, subreddit=self.subreddit, body=body, parent_fullname=self._require_fullname())

    def submit(self) -> "Comment":
        """Post this comment under ``parent_fullname`` and return the created comment."""
        if not self.parent_fullname:
            raise RedditControllerException("Cannot submit a comment without a parent.")
        response = self._action("/api/comment", api_type="json", thing_id=self.parent_fullname, text=self.body)
        return self._from_response(self.dispatch, response)

    async def submit_async(self) -> "Comment":
        if not self.parent_fullname:
            raise RedditControllerException("Cannot submit a comment without a parent.")
        response = await self._action_async(
            "/api/comment", api_type="json", thing_id=self.parent_fullname, text=self.body
        )
        return self._from_response(self.dispatch, response)

    def reply(self, body: str) -> "Comment":
        return self.comment(body).submit()

    async def reply_async(self, body: str) -> "Comment":
        return await self.comment(body).submit_async()

    def edit(self, body: str) -> "Comment":
        response = self._action("/api/editusertext", api_type="json", thing_id=self._require_fullname(), text=body)
        self.body = body
        return self._from_response(self.dispatch, response)

    def distinguish(self, how: str = "yes", sticky: bool = False) -> "Comment":
        """Mark as moderator/admin speech. ``how`` is one of (yes, no, admin, special)."""
        response = self._action(
            "/api/distinguish", api_type="json", how=how, id=self._require_fullname(), sticky=sticky
        )
        return self._from_response(self.dispatch, response)

    def about(self) -> "Comment":
        """Reload this comment from Reddit."""
        fullname = self._require_fullname()
        page = parse_listing(self.dispatch.get("/api/info", {"id": fullname}))
        for thing in page.things:
            if isinstance(thing, things.Comment) and thing.fullname == fullname:
                return Comment.from_thing(self.dispatch, thing)
        raise RedditControllerException("Unable to retrieve comment data.")
