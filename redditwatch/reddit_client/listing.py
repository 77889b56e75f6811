"""JSON-to-thing mapping and listing pagination."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from tqdm import tqdm

from . import config
from .snapshot import KeyFunc, identity_key
from .things import Comment, Message, MoreContainer, Post, Subreddit, User

logger = logging.getLogger(__name__)

KIND_MAP = {
    "t1": Comment,
    "t2": User,
    "t3": Post,
    "t4": Message,
    "t5": Subreddit,
}


class Page(NamedTuple):
    things: List[Any]
    after: Optional[str]
    before: Optional[str]


def parse_thing(child: Dict[str, Any]) -> Any:
    """Map one ``{"kind": ..., "data": ...}`` child onto its record type."""
    kind = child.get("kind")
    if kind == "more":
        return MoreContainer.from_dict(child)
    if kind == "t1":
        comments, _ = parse_comment_tree([child])
        return comments[0]

    thing_cls = KIND_MAP.get(kind)
    if thing_cls is None:
        logger.debug("Unmapped thing kind %r left as raw dict", kind)
        return child.get("data", child)
    return thing_cls.from_dict(child.get("data") or {})


def parse_listing(payload: Any) -> Page:
    """
    Parse a ``Listing`` payload into things plus pagination tokens.

    Accepts the full listing object or just its ``data`` member. Anything
    else (None, error bodies) gives an empty page.
    """
    if not isinstance(payload, dict):
        return Page([], None, None)
    data = payload.get("data", payload)
    if not isinstance(data, dict):
        return Page([], None, None)

    things = [parse_thing(child) for child in data.get("children") or [] if isinstance(child, dict)]
    return Page(things, data.get("after") or None, data.get("before") or None)


def parse_comment_tree(children: List[Any]) -> Tuple[List[Comment], List[MoreContainer]]:
    """Recursively map comments and their replies; collect "more" stubs separately."""
    comments: List[Comment] = []
    more: List[MoreContainer] = []

    for child in children:
        if not isinstance(child, dict):
            continue
        kind = child.get("kind")
        if kind == "more":
            more.append(MoreContainer.from_dict(child))
            continue
        if kind != "t1":
            continue

        comment_data = child.get("data", {})
        comment = Comment.from_dict(comment_data)

        replies = comment_data.get("replies", "")
        if isinstance(replies, dict):
            comment.replies, nested_more = parse_comment_tree(replies.get("data", {}).get("children", []))
            more.extend(nested_more)

        comments.append(comment)

    return comments, more


def flatten_comments(comments: List[Comment]) -> List[Comment]:
    """Depth-first walk: each comment followed by its replies."""
    flat: List[Comment] = []
    for comment in comments:
        flat.append(comment)
        flat.extend(flatten_comments(comment.replies))
    return flat


def _page_params(params: Optional[Dict[str, Any]], page_size: int, after: Optional[str]) -> Dict[str, Any]:
    page_params = dict(params or {})
    page_params["limit"] = page_size
    if after:
        page_params["after"] = after
    return page_params


def _take_new(page: List[Any], seen_ids: set, results: List[Any], key: KeyFunc, room: int) -> int:
    new_things = 0
    for thing in page:
        if new_things >= room:
            break
        thing_id = key(thing)
        if thing_id and thing_id not in seen_ids:
            seen_ids.add(thing_id)
            results.append(thing)
            new_things += 1
    return new_things


def paginate(
    dispatch,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    limit: int = config.MAX_LIMIT,
    batch_size: int = config.MAX_LIMIT,
    delay: float = config.DEFAULT_DELAY,
    key: KeyFunc = identity_key,
    verbose: bool = False,
) -> List[Any]:
    """
    Walk a listing endpoint page by page until ``limit`` unique things are collected.

    Args:
        dispatch: Object exposing ``get(path, params)``
        path: Listing endpoint, e.g. ``/r/python/new``
        params: Extra query parameters sent with every page
        limit: Max things to collect
        batch_size: Things per page (max 100)
        delay: Delay between page requests in seconds
        key: Identity function used for de-duplication
        verbose: Show a progress bar

    Returns:
        Things in listing order, without duplicates
    """
    results: List[Any] = []
    seen_ids: set = set()
    remaining = limit
    batch_size = max(1, min(batch_size, config.MAX_LIMIT))
    after = None
    empty_page_streak = 0

    pbar = tqdm(total=limit, desc=path, unit="thing", disable=not verbose)
    try:
        while remaining > 0:
            page_size = min(remaining, batch_size)
            page = parse_listing(dispatch.get(path, _page_params(params, page_size, after)))

            new_things = _take_new(page.things, seen_ids, results, key, remaining)
            pbar.update(new_things)
            remaining -= new_things

            # Stop conditions
            if not page.after:
                logger.debug("Reached end of %s (no pagination token)", path)
                break
            if new_things == 0:
                empty_page_streak += 1
                if empty_page_streak >= config.MAX_EMPTY_PAGES:
                    logger.debug("No new things from %s in %d pages; stopping", path, empty_page_streak)
                    break
            else:
                empty_page_streak = 0

            after = page.after
            if remaining > 0 and delay:
                time.sleep(delay)
    finally:
        pbar.close()

    return results


async def paginate_async(
    dispatch,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    limit: int = config.MAX_LIMIT,
    batch_size: int = config.MAX_LIMIT,
    delay: float = config.DEFAULT_DELAY,
    key: KeyFunc = identity_key,
    verbose: bool = False,
) -> List[Any]:
    """Async twin of :func:`paginate`; ``dispatch`` must expose ``get_async``."""
    results: List[Any] = []
    seen_ids: set = set()
    remaining = limit
    batch_size = max(1, min(batch_size, config.MAX_LIMIT))
    after = None
    empty_page_streak = 0

    pbar = tqdm(total=limit, desc=path, unit="thing", disable=not verbose)
    try:
        while remaining > 0:
            page_size = min(remaining, batch_size)
            page = parse_listing(await dispatch.get_async(path, _page_params(params, page_size, after)))

            new_things = _take_new(page.things, seen_ids, results, key, remaining)
            pbar.update(new_things)
            remaining -= new_things

            if not page.after:
                break
            if new_things == 0:
                empty_page_streak += 1
                if empty_page_streak >= config.MAX_EMPTY_PAGES:
                    break
            else:
                empty_page_streak = 0

            after = page.after
            if remaining > 0 and delay:
                await asyncio.sleep(delay)
    finally:
        pbar.close()

    return results
