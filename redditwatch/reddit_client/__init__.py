"""
Reddit Client Module

Controllers for the Reddit REST API with cached feeds that can be
monitored in the background for added and removed records.

Usage:
    from reddit_client import Reddit

    reddit = Reddit.from_env()
    messages = reddit.private_messages
    messages.on_change("inbox", lambda event: print(event.added))
    messages.monitor_inbox()
"""

from .auth import Credentials, RefreshTokenProvider, StaticTokenProvider
from .dispatch import Dispatch
from .events import ChangeEvent, EventHook
from .exceptions import RedditAPIError, RedditControllerException, RedditException, RedditValidationError
from .reddit import Reddit
from .snapshot import DiffResult, diff

__all__ = [
    "Reddit",
    "Dispatch",
    "Credentials",
    "RefreshTokenProvider",
    "StaticTokenProvider",
    "ChangeEvent",
    "EventHook",
    "DiffResult",
    "diff",
    "RedditException",
    "RedditAPIError",
    "RedditControllerException",
    "RedditValidationError",
]
__version__ = "1.0.0"
