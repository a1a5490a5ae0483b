"""In-memory contact directory with optional key-value persistence.

The directory owns an ordered list of ``Contact`` records. Every mutating
operation re-serializes the whole list to the configured store under one
key; the list is read back once when the directory is constructed.

Failures never raise. Each operation returns a sentinel instead:

    add    -> None
    delete -> False
    edit   -> None
    search -> []

and logs the reason through the module logger.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional

from ..storage import KeyValueStore
from .models import (
    MUTABLE_FIELDS,
    REQUIRED_FIELDS,
    Contact,
    format_created_at,
    is_valid_email,
)


logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "contacts"


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class ContactDirectory:
    """Ordered collection of contacts plus the operations over it."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        date_format: Optional[str] = None,
    ) -> None:
        self.store = store
        self.storage_key = storage_key
        self.date_format = date_format
        self._contacts: List[Contact] = []
        self._next_id = 1
        if store is not None:
            self._load()

    def __len__(self) -> int:
        return len(self._contacts)

    def __iter__(self) -> Iterator[Contact]:
        return iter(list(self._contacts))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def add(
        self,
        name: Optional[str],
        email: Optional[str],
        phone: Optional[str],
        notes: Optional[str] = "",
    ) -> Optional[Contact]:
        """Create a contact and append it to the directory.

        Args:
            name: Contact name (required)
            email: Email address (required, must look like user@domain.tld)
            phone: Phone number (required)
            notes: Free-form notes

        Returns:
            The new contact, or None when a field is missing or the email is invalid.
        """
        fields = {"name": _clean(name), "email": _clean(email), "phone": _clean(phone)}
        missing = [key for key in REQUIRED_FIELDS if not fields[key]]
        if missing:
            logger.error(f"Cannot add contact: missing required field(s) {', '.join(missing)}")
            return None

        if not is_valid_email(fields["email"]):
            logger.error(f"Cannot add contact: invalid email {fields['email']!r}")
            return None

        contact = Contact(
            id=self._allocate_id(),
            name=fields["name"],
            email=fields["email"],
            phone=fields["phone"],
            notes=_clean(notes),
            created_at=format_created_at(date_format=self.date_format),
        )
        self._contacts.append(contact)
        self._persist()

        logger.info(f"Added contact {contact.id} ({contact.name})")
        return contact

    def list_contacts(self) -> List[Contact]:
        """Return every contact in insertion order."""
        return list(self._contacts)

    def display(self, contacts: Optional[List[Contact]] = None) -> None:
        """Print one line per contact, defaulting to the whole directory."""
        if contacts is None:
            contacts = self._contacts
        if not contacts:
            print("No contacts to display.")
            return
        for contact in contacts:
            print(contact.to_line())

    def get(self, contact_id: int) -> Optional[Contact]:
        """Return the contact with ``contact_id``, or None."""
        return next((c for c in self._contacts if c.id == contact_id), None)

    def delete(self, contact_id: int) -> bool:
        """Remove a contact by id.

        Returns:
            True if deleted, False if not found
        """
        contact = self.get(contact_id)
        if contact is None:
            logger.error(f"Cannot delete contact: id {contact_id} not found")
            return False

        self._contacts.remove(contact)
        self._persist()

        logger.info(f"Deleted contact {contact.id} ({contact.name})")
        return True

    def edit(self, contact_id: int, updates: Dict[str, Any]) -> Optional[Contact]:
        """Apply a partial update to a contact.

        Only name, email, phone and notes can change. Other keys, including
        id and created_at, are ignored. Nothing is applied unless every
        provided value passes validation.

        Returns:
            The updated contact, or None if it was not found or an update was invalid.
        """
        contact = self.get(contact_id)
        if contact is None:
            logger.error(f"Cannot edit contact: id {contact_id} not found")
            return None

        if not isinstance(updates, Mapping):
            logger.error(f"Cannot edit contact {contact_id}: updates must be a mapping, got {type(updates).__name__}")
            return None

        changes: Dict[str, str] = {}
        for key, value in updates.items():
            if key not in MUTABLE_FIELDS:
                logger.debug(f"Ignoring update to unknown or immutable field {key!r}")
                continue
            changes[key] = _clean(value)

        if "email" in changes and not is_valid_email(changes["email"]):
            logger.error(f"Cannot edit contact {contact_id}: invalid email {changes['email']!r}")
            return None

        emptied = [key for key in REQUIRED_FIELDS if key in changes and not changes[key]]
        if emptied:
            logger.error(f"Cannot edit contact {contact_id}: {', '.join(emptied)} cannot be empty")
            return None

        for key, value in changes.items():
            setattr(contact, key, value)
        self._persist()

        logger.info(f"Updated contact {contact.id} ({contact.name})")
        return contact

    def search(self, term: Optional[str]) -> List[Contact]:
        """Case-insensitive substring search over name and email."""
        if not term:
            logger.error("Cannot search contacts: a search term is required")
            return []

        needle = term.lower()
        results = [
            c for c in self._contacts
            if needle in c.name.lower() or needle in c.email.lower()
        ]
        logger.info(f"Found {len(results)} contact(s) matching {term!r}")
        return results

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _allocate_id(self) -> int:
        contact_id = self._next_id
        self._next_id += 1
        return contact_id

    def _load(self) -> None:
        try:
            raw = self.store.get(self.storage_key)
        except Exception as e:
            logger.warning(f"Could not read stored contacts, starting empty: {e}")
            return
        if raw is None:
            return

        try:
            records = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Stored contacts are not valid JSON, starting empty: {e}")
            return
        if not isinstance(records, list):
            logger.warning("Stored contacts are not a list, starting empty")
            return

        for record in records:
            try:
                contact = Contact.from_dict(record)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable stored contact {record!r}: {e}")
                continue
            problems = contact.problems()
            if problems:
                logger.warning(f"Skipping invalid stored contact {contact.id}: {'; '.join(problems)}")
                continue
            if self.get(contact.id) is not None:
                logger.warning(f"Skipping stored contact with duplicate id {contact.id}")
                continue
            self._contacts.append(contact)

        if self._contacts:
            self._next_id = max(c.id for c in self._contacts) + 1
        logger.debug(f"Loaded {len(self._contacts)} contact(s) from {self.storage_key!r}")

    def _persist(self) -> None:
        if self.store is None:
            return
        payload = json.dumps([c.to_dict() for c in self._contacts], ensure_ascii=False)
        try:
            self.store.set(self.storage_key, payload)
        except Exception as e:
            logger.error(f"Failed to persist contacts, keeping in-memory changes: {e}")
