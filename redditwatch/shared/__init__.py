"""Shared utilities module."""

from .log import configure_logging
from .utils import ensure_dir, load_json, save_json, to_jsonable

__all__ = ["save_json", "load_json", "ensure_dir", "to_jsonable", "configure_logging"]
