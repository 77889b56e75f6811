"""Controllers: one object per Reddit resource, sharing a Dispatch handle."""

from .base import BaseController, FeedController, ThingController
from .comment import Comment
from .comments import Comments, CommentSort
from .emoji import Emoji
from .post import Post
from .private_messages import MessageFeed, PrivateMessages
from .subreddit import PostSort, Subreddit, SubredditPosts
from .user import User

__all__ = [
    "BaseController",
    "FeedController",
    "ThingController",
    "Comment",
    "Comments",
    "CommentSort",
    "Emoji",
    "Post",
    "MessageFeed",
    "PrivateMessages",
    "PostSort",
    "Subreddit",
    "SubredditPosts",
    "User",
]
