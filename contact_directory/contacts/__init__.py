"""Contact records and the in-memory directory."""
from .directory import (
    DEFAULT_STORAGE_KEY,
    ContactDirectory,
)
from .models import (
    EMAIL_PATTERN,
    Contact,
    format_created_at,
    is_valid_email,
)

__all__ = [
    # Records
    "Contact",
    "EMAIL_PATTERN",
    "format_created_at",
    "is_valid_email",
    # Directory
    "ContactDirectory",
    "DEFAULT_STORAGE_KEY",
]
