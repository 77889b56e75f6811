"""User controller."""

from __future__ import annotations

import logging
from typing import List

from .. import config, things
from ..exceptions import RedditControllerException
from ..listing import paginate, paginate_async, parse_thing
from .base import BaseController

logger = logging.getLogger(__name__)


class User(BaseController):
    """An account by name, with its profile and submission history."""

    def __init__(self, dispatch, name: str):
        super().__init__(dispatch)
        self.name = name[2:] if name.startswith("u/") else name

    def __repr__(self) -> str:
        return f"User(name={self.name!r})"

    def about(self) -> things.User:
        response = self.dispatch.get(f"/user/{self.name}/about")
        user = parse_thing(response) if isinstance(response, dict) else None
        if not isinstance(user, things.User):
            raise RedditControllerException("Unable to retrieve user data.")
        return user

    def post_history(self, limit: int = config.DEFAULT_LIMIT, sort: str = "new", verbose: bool = False) -> List[things.Post]:
        results = paginate(self.dispatch, f"/user/{self.name}/submitted", {"sort": sort}, limit=limit, verbose=verbose)
        return [thing for thing in results if isinstance(thing, things.Post)]

    def comment_history(
        self, limit: int = config.DEFAULT_LIMIT, sort: str = "new", verbose: bool = False
    ) -> List[things.Comment]:
        results = paginate(self.dispatch, f"/user/{self.name}/comments", {"sort": sort}, limit=limit, verbose=verbose)
        logger.debug("Fetched %d comments for u/%s", len(results), self.name)
        return [thing for thing in results if isinstance(thing, things.Comment)]

    async def post_history_async(self, limit: int = config.DEFAULT_LIMIT, sort: str = "new") -> List[things.Post]:
        results = await paginate_async(self.dispatch, f"/user/{self.name}/submitted", {"sort": sort}, limit=limit)
        return [thing for thing in results if isinstance(thing, things.Post)]

    async def comment_history_async(self, limit: int = config.DEFAULT_LIMIT, sort: str = "new") -> List[things.Comment]:
        results = await paginate_async(self.dispatch, f"/user/{self.name}/comments", {"sort": sort}, limit=limit)
        return [thing for thing in results if isinstance(thing, things.Comment)]
