"""Configuration helpers for the contact directory."""
from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv


STORAGE_BACKENDS = ("memory", "file", "firestore")
DEFAULT_STORAGE_DIR = Path(__file__).resolve().parents[1] / "contacts_store"


class ConfigError(RuntimeError):
    """Raised when configuration values are invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the directory and CLI."""

    environment: str = "local"
    storage_backend: str = "file"
    storage_dir: Path = DEFAULT_STORAGE_DIR
    firestore_collection: str = "contacts"
    storage_key: str = "contacts"
    firestore_project: Optional[str] = None
    date_format: Optional[str] = None
    log_level: str = "WARNING"


def load_settings(*, use_dotenv: bool = True) -> Settings:
    """Load settings from environment variables.

    Args:
        use_dotenv: Read the nearest ``.env`` file, searching up from the
            working directory, into the environment first.

    Returns:
        Settings with defaults filled in for anything unset.

    Raises:
        ConfigError: if CONTACTS_STORAGE names an unknown backend.
    """

    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    backend = os.getenv("CONTACTS_STORAGE", "file").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ConfigError(
            f"Unknown CONTACTS_STORAGE {backend!r}. "
            f"Expected one of: {', '.join(STORAGE_BACKENDS)}."
        )

    storage_dir = os.getenv("CONTACTS_DIR", "").strip()

    return Settings(
        environment=os.getenv("CONTACTS_ENV", "local"),
        storage_backend=backend,
        storage_dir=Path(storage_dir) if storage_dir else DEFAULT_STORAGE_DIR,
        firestore_collection=os.getenv("CONTACTS_COLLECTION", "contacts"),
        storage_key=os.getenv("CONTACTS_STORAGE_KEY", "contacts"),
        firestore_project=os.getenv("CONTACTS_FIRESTORE_PROJECT") or None,
        date_format=os.getenv("CONTACTS_DATE_FORMAT") or None,
        log_level=os.getenv("CONTACTS_LOG_LEVEL", "WARNING").strip().upper(),
    )
