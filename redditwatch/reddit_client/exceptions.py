"""Exception hierarchy for the Reddit client."""

from __future__ import annotations

from typing import Any, List, Optional


class RedditException(Exception):
    """Base class for every error raised by this package."""


class RedditControllerException(RedditException):
    """A controller was used incorrectly (unknown feed, missing data, ...)."""


class RedditValidationError(RedditException):
    """Reddit accepted the request but reported errors in the ``json.errors`` payload."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class RedditAPIError(RedditException):
    """Transport-level failure returned by the Reddit API."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RedditBadRequestError(RedditAPIError):
    """HTTP 400."""


class RedditUnauthorizedError(RedditAPIError):
    """HTTP 401, usually an expired or revoked token."""


class RedditForbiddenError(RedditAPIError):
    """HTTP 403."""


class RedditNotFoundError(RedditAPIError):
    """HTTP 404 / 410."""


class RedditRateLimitError(RedditAPIError):
    """HTTP 429 after the transport's own retries were exhausted."""


class RedditServerError(RedditAPIError):
    """HTTP 5xx."""


_STATUS_ERRORS = {
    400: RedditBadRequestError,
    401: RedditUnauthorizedError,
    403: RedditForbiddenError,
    404: RedditNotFoundError,
    410: RedditNotFoundError,
    429: RedditRateLimitError,
}


def error_for_status(status_code: int, message: str, response_body: Any = None) -> RedditAPIError:
    """Build the exception matching an HTTP error status."""
    error_cls = _STATUS_ERRORS.get(status_code)
    if error_cls is None:
        error_cls = RedditServerError if status_code >= 500 else RedditAPIError
    return error_cls(message, status_code=status_code, response_body=response_body)
