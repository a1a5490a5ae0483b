"""Key-value persistence backends for the contact directory."""
from __future__ import annotations

from .store import (
    FileStore,
    FirestoreStore,
    KeyValueStore,
    MemoryStore,
    build_store,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "FirestoreStore",
    "build_store",
]
