"""Lazily created Firestore client for the Firestore contact store."""
from __future__ import annotations

from typing import Any, Optional

_firestore_client = None


def get_firestore_client(project_id: Optional[str] = None) -> Any:
    """Return the cached Firestore client, creating it on first use.

    The default Firebase app is initialized with application default
    credentials; ``project_id`` is only needed when those credentials do
    not name a project.
    """

    global _firestore_client
    if _firestore_client is not None:
        return _firestore_client

    try:
        import firebase_admin
        from firebase_admin import firestore
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise RuntimeError(
            "firebase-admin is required for the Firestore contact store. "
            "Install dependencies or set CONTACTS_STORAGE=file."
        ) from exc

    if not firebase_admin._apps:
        options = {"projectId": project_id} if project_id else None
        firebase_admin.initialize_app(options=options)
    _firestore_client = firestore.client()
    return _firestore_client


def reset_firestore_client() -> None:
    """Forget the cached client so the next call builds a new one."""
    global _firestore_client
    _firestore_client = None
