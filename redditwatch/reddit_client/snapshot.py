"""Feed snapshots, their identity keys, and the snapshot differ."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Sequence, Tuple

Snapshot = Tuple[Any, ...]
KeyFunc = Callable[[Any], Any]


def identity_key(record: Any) -> Any:
    """
    Return the stable identity of a record.

    Things are keyed by fullname (``t4_abc``), falling back to the bare id.
    Plain dicts use ``name``, then ``id``, then ``permalink``.
    """
    if isinstance(record, dict):
        return record.get("name") or record.get("id") or record.get("permalink", "")
    return getattr(record, "fullname", None) or getattr(record, "id", None)


def make_snapshot(records: Iterable[Any], key: KeyFunc = identity_key) -> Snapshot:
    """Freeze ``records`` into a snapshot, dropping later duplicates of a key."""
    seen = set()
    out: List[Any] = []
    for record in records:
        record_key = key(record)
        if record_key in seen:
            continue
        seen.add(record_key)
        out.append(record)
    return tuple(out)


class DiffResult(NamedTuple):
    changed: bool
    added: List[Any]
    removed: List[Any]


def diff(old: Optional[Sequence[Any]], new: Optional[Sequence[Any]], key: KeyFunc = identity_key) -> DiffResult:
    """
    Compare two snapshots by identity key.

    ``added`` keeps the order of ``new`` and ``removed`` the order of ``old``.
    A record whose key is in both snapshots is never reported, even if its
    content changed.
    """
    old = old or ()
    new = new or ()
    old_keys = {key(record) for record in old}
    new_keys = {key(record) for record in new}

    added = [record for record in new if key(record) not in old_keys]
    removed = [record for record in old if key(record) not in new_keys]
    return DiffResult(bool(added or removed), added, removed)


@dataclass(frozen=True)
class CacheEntry:
    snapshot: Snapshot
    last_updated: float
