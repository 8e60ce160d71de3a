"""Persistence for the grocery list.

The list is stored as one JSON snapshot under a fixed key in a simple
key-value store.  Every save overwrites the whole snapshot.  Reading is
fail-soft: a missing, unreadable or malformed snapshot loads as an empty
list.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol

from . import config
from .grocery import GroceryDecodeError, GroceryItem

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store, used in tests and as a session-only fallback."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Store backed by a JSON object file mapping keys to strings."""

    def __init__(self, path: Path | None = None):
        self.path = Path(path or config.STORE_PATH)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w', encoding='utf-8') as handle:
            json.dump(data, handle, indent=2, sort_keys=True)


def encode_items(items: Iterable[GroceryItem]) -> str:
    payload = {
        'version': SNAPSHOT_VERSION,
        'items': [item.to_dict() for item in items],
    }
    return json.dumps(payload, allow_nan=False)


def decode_items(raw: str) -> List[GroceryItem]:
    """Parse a stored snapshot.

    Accepts the versioned ``{"version": 1, "items": [...]}`` document and a
    bare list of items (unversioned snapshots).

    Raises:
        GroceryDecodeError: if the snapshot is not a valid item list.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise GroceryDecodeError(f"invalid JSON: {exc}") from exc

    if isinstance(data, dict):
        version = data.get('version')
        if version != SNAPSHOT_VERSION:
            raise GroceryDecodeError(f"unsupported snapshot version: {version!r}")
        entries = data.get('items')
    else:
        entries = data
    if not isinstance(entries, list):
        raise GroceryDecodeError("snapshot does not contain an item list")

    items = [GroceryItem.from_dict(entry) for entry in entries]
    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        raise GroceryDecodeError("duplicate item ids")
    return items


class GroceryRepository:
    """Loads and saves the full grocery list under a single key."""

    def __init__(self, store: KeyValueStore, key: str = config.GROCERY_LIST_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[GroceryItem]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        try:
            return decode_items(raw)
        except GroceryDecodeError as exc:
            logger.warning("Discarding stored grocery list %r: %s", self.key, exc)
            return []

    def save(self, items: Iterable[GroceryItem]) -> None:
        self.store.set(self.key, encode_items(items))
