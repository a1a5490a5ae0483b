"""Key-value stores used to persist the contact list.

Each store maps a string key to a string value. The directory only ever
uses one key, holding the JSON-encoded contact list.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from ..config import Settings
from ..firestore import get_firestore_client


logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal get/set interface shared by every backend."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryStore:
    """Dictionary-backed store that lives as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStore:
    """Stores each key as ``<key>.json`` inside a directory."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self.directory / f"{safe_key}.json"

    def get(self, key: str) -> Optional[str]:
        filepath = self._path(key)
        if not filepath.exists():
            return None
        return filepath.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as f:
            f.write(value)


class FirestoreStore:
    """Stores each key as a document in a Firestore collection.

    When a ``fallback`` store is given, Firestore errors are logged and the
    call is retried against the fallback instead of raising.
    """

    def __init__(
        self,
        client: Any,
        collection: str = "contacts",
        fallback: Optional[KeyValueStore] = None,
    ) -> None:
        self.client = client
        self.collection = collection
        self.fallback = fallback

    def get(self, key: str) -> Optional[str]:
        try:
            doc = self.client.collection(self.collection).document(key).get()
        except Exception as e:
            if self.fallback is None:
                raise
            logger.warning(f"Firestore read failed, falling back to local: {e}")
            return self.fallback.get(key)

        if doc.exists:
            return (doc.to_dict() or {}).get("value")
        return None

    def set(self, key: str, value: str) -> None:
        try:
            doc_ref = self.client.collection(self.collection).document(key)
            doc_ref.set({"value": value, "updated_at": _now()})
        except Exception as e:
            if self.fallback is None:
                raise
            logger.warning(f"Firestore write failed, falling back to local: {e}")
            self.fallback.set(key, value)


def build_store(settings: Settings) -> KeyValueStore:
    """Create the store selected by ``settings.storage_backend``."""
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryStore()

    file_store = FileStore(settings.storage_dir)
    if backend == "file":
        return file_store

    try:
        client = get_firestore_client(settings.firestore_project)
    except Exception as e:
        logger.warning(f"Firestore unavailable, using local files in {settings.storage_dir}: {e}")
        return file_store
    return FirestoreStore(client, settings.firestore_collection, fallback=file_store)
