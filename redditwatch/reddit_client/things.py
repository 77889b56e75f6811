"""Typed records ("things") mapped from Reddit JSON payloads.

Every record keeps the untouched payload in ``raw`` so callers can reach
fields that are not modelled here, and so records can be written back out as
JSON unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _timestamp(value: Any) -> Optional[datetime]:
    """Convert a Reddit epoch value to an aware datetime; ``false``/missing gives None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def _awards(data: Dict[str, Any]) -> List["Award"]:
    return [Award.from_dict(award) for award in data.get("all_awardings") or []]


@dataclass
class Award:
    id: Optional[str] = None
    award_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    icon_40: Optional[str] = None
    icon_70: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Award":
        return cls(
            id=data.get("id"),
            award_id=data.get("award_id"),
            name=data.get("name"),
            description=data.get("description"),
            url=data.get("url"),
            icon_40=data.get("icon_40"),
            icon_70=data.get("icon_70"),
        )


@dataclass
class Post:
    """A link or self post (kind ``t3``)."""

    id: Optional[str] = None
    name: Optional[str] = None
    subreddit: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    permalink: Optional[str] = None
    url: Optional[str] = None
    selftext: str = ""
    created: Optional[datetime] = None
    edited: Optional[datetime] = None
    score: int = 0
    ups: int = 0
    downs: int = 0
    num_comments: int = 0
    removed: bool = False
    spam: bool = False
    over_18: bool = False
    awards: List[Award] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def fullname(self) -> Optional[str]:
        return self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Post":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            subreddit=data.get("subreddit"),
            title=data.get("title"),
            author=data.get("author"),
            permalink=data.get("permalink"),
            url=data.get("url"),
            selftext=data.get("selftext") or "",
            created=_timestamp(data.get("created_utc")),
            edited=_timestamp(data.get("edited")),
            score=data.get("score") or 0,
            ups=data.get("ups") or 0,
            downs=data.get("downs") or 0,
            num_comments=data.get("num_comments") or 0,
            removed=bool(data.get("removed")),
            spam=bool(data.get("spam")),
            over_18=bool(data.get("over_18")),
            awards=_awards(data),
            raw=data,
        )


@dataclass
class Comment:
    """A comment (kind ``t1``). ``replies`` holds direct children only."""

    id: Optional[str] = None
    name: Optional[str] = None
    subreddit: Optional[str] = None
    author: Optional[str] = None
    body: str = ""
    body_html: Optional[str] = None
    link_id: Optional[str] = None
    parent_id: Optional[str] = None
    permalink: Optional[str] = None
    depth: int = 0
    collapsed: bool = False
    collapsed_reason: Optional[str] = None
    is_submitter: bool = False
    score_hidden: bool = False
    created: Optional[datetime] = None
    edited: Optional[datetime] = None
    score: int = 0
    ups: int = 0
    downs: int = 0
    removed: bool = False
    spam: bool = False
    replies: List["Comment"] = field(default_factory=list)
    awards: List[Award] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def fullname(self) -> Optional[str]:
        return self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        # Replies are mapped by listing.parse_comment_tree, which knows about "more" stubs.
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            subreddit=data.get("subreddit"),
            author=data.get("author"),
            body=data.get("body") or "",
            body_html=data.get("body_html"),
            link_id=data.get("link_id"),
            parent_id=data.get("parent_id"),
            permalink=data.get("permalink"),
            depth=data.get("depth") or 0,
            collapsed=bool(data.get("collapsed")),
            collapsed_reason=data.get("collapsed_reason"),
            is_submitter=bool(data.get("is_submitter")),
            score_hidden=bool(data.get("score_hidden")),
            created=_timestamp(data.get("created_utc")),
            edited=_timestamp(data.get("edited")),
            score=data.get("score") or 0,
            ups=data.get("ups") or 0,
            downs=data.get("downs") or 0,
            removed=bool(data.get("removed")),
            spam=bool(data.get("spam")),
            awards=_awards(data),
            raw=data,
        )


@dataclass
class Message:
    """A private message or comment reply in the inbox (kind ``t4``)."""

    id: Optional[str] = None
    name: Optional[str] = None
    author: Optional[str] = None
    dest: Optional[str] = None
    subject: Optional[str] = None
    body: str = ""
    body_html: Optional[str] = None
    subreddit: Optional[str] = None
    parent_id: Optional[str] = None
    first_message_name: Optional[str] = None
    context: Optional[str] = None
    distinguished: Optional[str] = None
    was_comment: bool = False
    new: bool = False
    created: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def fullname(self) -> Optional[str]:
        return self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            author=data.get("author"),
            dest=data.get("dest"),
            subject=data.get("subject"),
            body=data.get("body") or "",
            body_html=data.get("body_html"),
            subreddit=data.get("subreddit"),
            parent_id=data.get("parent_id"),
            first_message_name=data.get("first_message_name"),
            context=data.get("context"),
            distinguished=data.get("distinguished"),
            was_comment=bool(data.get("was_comment")),
            new=bool(data.get("new")),
            created=_timestamp(data.get("created_utc")),
            raw=data,
        )


@dataclass
class Subreddit:
    """Subreddit metadata (kind ``t5``)."""

    id: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    title: Optional[str] = None
    public_description: str = ""
    description: str = ""
    subreddit_type: Optional[str] = None
    subscribers: int = 0
    over_18: bool = False
    url: Optional[str] = None
    created: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def fullname(self) -> Optional[str]:
        return self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subreddit":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            display_name=data.get("display_name"),
            title=data.get("title"),
            public_description=data.get("public_description") or "",
            description=data.get("description") or "",
            subreddit_type=data.get("subreddit_type"),
            subscribers=data.get("subscribers") or 0,
            over_18=bool(data.get("over18")),
            url=data.get("url"),
            created=_timestamp(data.get("created_utc")),
            raw=data,
        )


@dataclass
class UserSubreddit:
    """The profile subreddit embedded in a user's ``about`` payload."""

    name: Optional[str] = None
    display_name: Optional[str] = None
    title: Optional[str] = None
    public_description: str = ""
    subscribers: int = 0
    over_18: bool = False
    url: Optional[str] = None
    icon_img: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserSubreddit":
        return cls(
            name=data.get("name"),
            display_name=data.get("display_name"),
            title=data.get("title"),
            public_description=data.get("public_description") or "",
            subscribers=data.get("subscribers") or 0,
            over_18=bool(data.get("over_18")),
            url=data.get("url"),
            icon_img=data.get("icon_img"),
        )


@dataclass
class UserSubredditContainer:
    data: Optional[UserSubreddit] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "UserSubredditContainer":
        data = payload.get("data")
        return cls(
            data=UserSubreddit.from_dict(data) if data else None,
            name=payload.get("name"),
        )


@dataclass
class User:
    """An account (kind ``t2``)."""

    id: Optional[str] = None
    name: Optional[str] = None
    link_karma: int = 0
    comment_karma: int = 0
    is_mod: bool = False
    is_gold: bool = False
    verified: bool = False
    created: Optional[datetime] = None
    subreddit: Optional[UserSubreddit] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def fullname(self) -> Optional[str]:
        return f"t2_{self.id}" if self.id else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        subreddit = data.get("subreddit")
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            link_karma=data.get("link_karma") or 0,
            comment_karma=data.get("comment_karma") or 0,
            is_mod=bool(data.get("is_mod")),
            is_gold=bool(data.get("is_gold")),
            verified=bool(data.get("verified")),
            created=_timestamp(data.get("created_utc")),
            subreddit=UserSubreddit.from_dict(subreddit) if isinstance(subreddit, dict) else None,
            raw=data,
        )


@dataclass
class MoreData:
    """Placeholder for comments the API did not expand."""

    id: Optional[str] = None
    name: Optional[str] = None
    parent_id: Optional[str] = None
    depth: int = 0
    count: int = 0
    children: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoreData":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            parent_id=data.get("parent_id"),
            depth=data.get("depth") or 0,
            count=data.get("count") or 0,
            children=list(data.get("children") or []),
        )


@dataclass
class MoreContainer:
    kind: str = "more"
    data: Optional[MoreData] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "MoreContainer":
        data = payload.get("data")
        return cls(kind=payload.get("kind", "more"), data=MoreData.from_dict(data) if data else None)


@dataclass
class StatusResult:
    status: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatusResult":
        return cls(status=bool(data.get("status")))


@dataclass
class SubredditAutocompleteResult:
    name: Optional[str] = None
    num_subscribers: int = 0
    icon: Optional[str] = None
    key_color: Optional[str] = None
    allowed_post_types: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubredditAutocompleteResult":
        return cls(
            name=data.get("name"),
            num_subscribers=data.get("numSubscribers") or 0,
            icon=data.get("icon"),
            key_color=data.get("keyColor"),
            allowed_post_types=dict(data.get("allowedPostTypes") or {}),
        )


@dataclass
class SubredditAutocompleteResultContainer:
    subreddits: List[SubredditAutocompleteResult] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubredditAutocompleteResultContainer":
        return cls(
            subreddits=[SubredditAutocompleteResult.from_dict(sr) for sr in data.get("subreddits") or []]
        )
