"""Subreddit emoji controller."""

from __future__ import annotations

from typing import Any

from ..things import StatusResult
from .base import BaseController


class Emoji(BaseController):
    """Custom emojis of one subreddit."""

    def __init__(self, dispatch, subreddit: str):
        super().__init__(dispatch)
        self.subreddit = subreddit

    def _path(self, endpoint: str) -> str:
        return f"/api/v1/{self.subreddit}/{endpoint}"

    def all(self) -> Any:
        """Reddit's own emojis plus this subreddit's, as returned by the API."""
        return self.dispatch.get(self._path("emojis/all"))

    def add(self, name: str, s3_key: str) -> StatusResult:
        """
        Register an uploaded image as an emoji.

        Args:
            name: Alphanumeric plus '-' and '_', at most 24 characters
            s3_key: Key of the image uploaded with the lease from ``acquire_lease``
        """
        response = self._action(self._path("emoji.json"), name=name, s3_key=s3_key)
        return StatusResult.from_dict(response if isinstance(response, dict) else {})

    def delete(self, name: str) -> Any:
        return self.dispatch.delete(self._path(f"emoji/{name}"))

    def acquire_lease(self, file_path: str, mime_type: str) -> Any:
        """Credentials and URL for uploading an emoji image to S3."""
        return self._action(self._path("emoji_asset_upload_s3.json"), filepath=file_path, mimetype=mime_type)

    def custom_size(self, height: int = 0, width: int = 0) -> Any:
        """Set custom emoji size (1-40 each); zeros turn custom sizing off."""
        return self._action(self._path("emoji_custom_size"), height=height, width=width)
