"""Post controller."""

from __future__ import annotations

import html
from datetime import datetime
from typing import Any, List, Optional

from .. import things
from ..exceptions import RedditControllerException
from ..listing import parse_listing, parse_thing
from .base import ThingController, response_things
from .comment import Comment
from .comments import Comments


class Post(ThingController):
    """
    A single post: its data plus the actions you can take on it.

    Example:
        post = reddit.post("t3_abc123").about()
        post.upvote()
        post.reply("Nice find!")
    """

    def __init__(
        self,
        dispatch,
        fullname: Optional[str] = None,
        subreddit: Optional[str] = None,
        title: Optional[str] = None,
        author: Optional[str] = None,
        id: Optional[str] = None,
        permalink: Optional[str] = None,
        created: Optional[datetime] = None,
        edited: Optional[datetime] = None,
        score: int = 0,
        up_votes: int = 0,
        down_votes: int = 0,
        removed: bool = False,
        spam: bool = False,
        nsfw: bool = False,
        listing: Optional[things.Post] = None,
    ):
        super().__init__(dispatch)
        self.fullname = fullname
        self.subreddit = subreddit
        self.title = title
        self.author = author
        self.id = id or (fullname[3:] if fullname and fullname.startswith("t3_") else None)
        self.permalink = permalink
        self.created = created
        self.edited = edited
        self.score = score
        self.up_votes = up_votes
        self.down_votes = down_votes
        self.removed = removed
        self.spam = spam
        self.nsfw = nsfw
        self.listing = listing
        self._comments: Optional[Comments] = None

    @classmethod
    def from_thing(cls, dispatch, post: things.Post) -> "Post":
        return cls(
            dispatch,
            fullname=post.fullname,
            subreddit=post.subreddit,
            title=post.title,
            author=post.author,
            id=post.id,
            permalink=post.permalink,
            created=post.created,
            edited=post.edited,
            score=post.score,
            up_votes=post.ups,
            down_votes=post.downs,
            removed=post.removed,
            spam=post.spam,
            nsfw=post.over_18,
            listing=post,
        )

    @property
    def title(self) -> Optional[str]:
        return self._title

    @title.setter
    def title(self, value: Optional[str]) -> None:
        # Reddit sends titles HTML-escaped (&amp; and friends).
        self._title = html.unescape(value) if value else value

    def __repr__(self) -> str:
        return f"Post(fullname={self.fullname!r}, title={self.title!r})"

    @property
    def comments(self) -> Comments:
        """Comment feeds for this post, created on first access."""
        if self._comments is None:
            if not self.id:
                raise RedditControllerException("Post has no id; load it before reading comments.")
            self._comments = Comments(self.dispatch, self.id, self.subreddit)
        return self._comments

    def comment(self, body: str) -> Comment:
        """A new, unsubmitted top-level comment on this post."""
        return Comment(self.dispatch, subreddit=self.subreddit, body=body, parent_fullname=self._require_fullname())

    def reply(self, body: str) -> Comment:
        return self.comment(body).submit()

    async def reply_async(self, body: str) -> Comment:
        return await self.comment(body).submit_async()

    def about(self) -> "Post":
        """Reload this post from Reddit."""
        fullname = self._require_fullname()
        path = f"/r/{self.subreddit}/api/info" if self.subreddit else "/api/info"
        page = parse_listing(self.validate(self.dispatch.get(path, {"id": fullname})))
        posts = [thing for thing in page.things if isinstance(thing, things.Post)]
        if not posts or posts[0].fullname != fullname:
            raise RedditControllerException("Unable to retrieve post data.")
        return Post.from_thing(self.dispatch, posts[0])

    def _first_post(self, response: Any) -> "Post":
        for child in response_things(response):
            thing = parse_thing(child)
            if isinstance(thing, things.Post):
                return Post.from_thing(self.dispatch, thing)
        raise RedditControllerException("Reddit did not return the post.")

    def distinguish(self, how: str = "yes") -> "Post":
        """Mark as moderator/admin speech. ``how`` is one of (yes, no, admin, special)."""
        response = self._action("/api/distinguish", api_type="json", how=how, id=self._require_fullname())
        return self._first_post(response)

    async def distinguish_async(self, how: str = "yes") -> "Post":
        response = await self._action_async("/api/distinguish", api_type="json", how=how, id=self._require_fullname())
        return self._first_post(response)

    def hide(self) -> None:
        self._action("/api/hide", id=self._require_fullname())

    async def hide_async(self) -> None:
        await self._action_async("/api/hide", id=self._require_fullname())

    def unhide(self) -> None:
        self._action("/api/unhide", id=self._require_fullname())

    async def unhide_async(self) -> None:
        await self._action_async("/api/unhide", id=self._require_fullname())

    def mark_nsfw(self) -> None:
        self._action("/api/marknsfw", id=self._require_fullname())

    async def mark_nsfw_async(self) -> None:
        await self._action_async("/api/marknsfw", id=self._require_fullname())

    def unmark_nsfw(self) -> None:
        self._action("/api/unmarknsfw", id=self._require_fullname())

    async def unmark_nsfw_async(self) -> None:
        await self._action_async("/api/unmarknsfw", id=self._require_fullname())

    def spoiler(self) -> None:
        self._action("/api/spoiler", id=self._require_fullname())

    async def spoiler_async(self) -> None:
        await self._action_async("/api/spoiler", id=self._require_fullname())

    def unspoiler(self) -> None:
        self._action("/api/unspoiler", id=self._require_fullname())

    async def unspoiler_async(self) -> None:
        await self._action_async("/api/unspoiler", id=self._require_fullname())

    def enable_contest_mode(self) -> None:
        self._action("/api/set_contest_mode", api_type="json", id=self._require_fullname(), state=True)

    async def enable_contest_mode_async(self) -> None:
        await self._action_async("/api/set_contest_mode", api_type="json", id=self._require_fullname(), state=True)

    def disable_contest_mode(self) -> None:
        self._action("/api/set_contest_mode", api_type="json", id=self._require_fullname(), state=False)

    async def disable_contest_mode_async(self) -> None:
        await self._action_async("/api/set_contest_mode", api_type="json", id=self._require_fullname(), state=False)

    def set_subreddit_sticky(self, num: int = 1, to_profile: bool = False) -> None:
        self._action(
            "/api/set_subreddit_sticky",
            api_type="json",
            id=self._require_fullname(),
            num=num,
            state=True,
            to_profile=to_profile,
        )

    def unset_subreddit_sticky(self, num: int = 1, to_profile: bool = False) -> None:
        self._action(
            "/api/set_subreddit_sticky",
            api_type="json",
            id=self._require_fullname(),
            num=num,
            state=False,
            to_profile=to_profile,
        )

    def set_suggested_sort(self, sort: str) -> None:
        """One of (confidence, top, new, controversial, old, random, qa, live, blank)."""
        self._action("/api/set_suggested_sort", api_type="json", id=self._require_fullname(), sort=sort)

    def more_children(
        self,
        children: List[str],
        limit_children: bool = False,
        sort: str = "confidence",
        id: Optional[str] = None,
    ) -> List[Any]:
        """Expand the comment ids held by a "more" stub into things."""
        response = self.validate(
            self.dispatch.get(
                "/api/morechildren",
                {
                    "api_type": "json",
                    "link_id": self._require_fullname(),
                    "children": ",".join(children),
                    "limit_children": limit_children,
                    "sort": sort,
                    "id": id,
                },
            )
        )
        return [parse_thing(child) for child in response_things(response)]

    def flair_selector(self, username: Optional[str] = None) -> Any:
        """Flair choices available for this post (raw payload)."""
        path = f"/r/{self.subreddit}/api/flairselector" if self.subreddit else "/api/flairselector"
        return self._action(path, link=self._require_fullname(), name=username)
