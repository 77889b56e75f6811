"""
Shared pytest fixtures.

Controllers only talk to their dispatch, so most tests swap in a
``FakeDispatch`` whose transport methods are mocks and whose registry is
real.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from reddit_client.monitoring import MonitorRegistry


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDispatch:
    def __init__(self, monitoring_delay: float = 0.01):
        self.registry = MonitorRegistry()
        self.monitoring_delay = monitoring_delay
        self.get = MagicMock(return_value={})
        self.post = MagicMock(return_value={})
        self.delete = MagicMock(return_value={})
        self.get_async = AsyncMock(return_value={})
        self.post_async = AsyncMock(return_value={})
        self.delete_async = AsyncMock(return_value={})

    def close(self, join_timeout=None):
        for loop in self.registry.stop_all():
            loop.join(join_timeout)


def message(fullname: str, subject: str = "hello", author: str = "someone") -> dict:
    return {
        "kind": "t4",
        "data": {
            "id": fullname.split("_", 1)[1],
            "name": fullname,
            "author": author,
            "subject": subject,
            "body": f"body of {fullname}",
            "created_utc": 1700000000,
        },
    }


def listing(*children, after=None, before=None) -> dict:
    return {"kind": "Listing", "data": {"children": list(children), "after": after, "before": before}}


def post(fullname: str, title: str = "A post", subreddit: str = "python") -> dict:
    return {
        "kind": "t3",
        "data": {
            "id": fullname.split("_", 1)[1],
            "name": fullname,
            "title": title,
            "subreddit": subreddit,
            "author": "poster",
            "score": 10,
            "ups": 12,
            "downs": 2,
            "over_18": False,
            "created_utc": 1700000000,
        },
    }


def comment(fullname: str, body: str = "text", parent: str = "t3_p1", replies=None) -> dict:
    data = {
        "id": fullname.split("_", 1)[1],
        "name": fullname,
        "body": body,
        "parent_id": parent,
        "author": "commenter",
        "subreddit": "python",
        "created_utc": 1700000000,
        "replies": replies if replies is not None else "",
    }
    return {"kind": "t1", "data": data}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def dispatch():
    fake = FakeDispatch()
    yield fake
    fake.close(join_timeout=2)
