#!/usr/bin/env python3
"""Contact Directory CLI."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict

from contact_directory.config import ConfigError, Settings, load_settings
from contact_directory.contacts import ContactDirectory
from contact_directory.storage import build_store


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contact-directory",
        description="Manage a small contact list stored in a key-value store.",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Diagnostic verbosity (defaults to CONTACTS_LOG_LEVEL or WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Add a contact.")
    add_parser.add_argument("name", help="Contact name.")
    add_parser.add_argument("email", help="Email address (user@domain.tld).")
    add_parser.add_argument("phone", help="Phone number.")
    add_parser.add_argument("--notes", default="", help="Optional notes.")

    subparsers.add_parser("list", help="Show every contact.")

    search_parser = subparsers.add_parser(
        "search",
        help="Find contacts whose name or email contains a term.",
    )
    search_parser.add_argument("term", help="Case-insensitive search term.")

    delete_parser = subparsers.add_parser("delete", help="Delete a contact by ID.")
    delete_parser.add_argument("contact_id", type=int, help="Contact ID.")

    edit_parser = subparsers.add_parser("edit", help="Change fields of a contact.")
    edit_parser.add_argument("contact_id", type=int, help="Contact ID.")
    edit_parser.add_argument("--name", help="New name.")
    edit_parser.add_argument("--email", help="New email address.")
    edit_parser.add_argument("--phone", help="New phone number.")
    edit_parser.add_argument("--notes", help="New notes.")

    subparsers.add_parser(
        "demo",
        help="Walk through add/search/edit/delete on a throwaway in-memory list.",
    )

    return parser


def _log_format(environment: str) -> str:
    return f"%(levelname)s [{environment}] %(name)s: %(message)s"


def _configure_logging(level: str, environment: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=_log_format(environment),
        stream=sys.stderr,
    )


def _open_directory(settings: Settings) -> ContactDirectory:
    return ContactDirectory(
        build_store(settings),
        storage_key=settings.storage_key,
        date_format=settings.date_format,
    )


def _cmd_add(directory: ContactDirectory, name: str, email: str, phone: str, notes: str) -> int:
    contact = directory.add(name, email, phone, notes)
    if contact is None:
        print("Contact was not added.", file=sys.stderr)
        return 1
    print(f"Added: {contact.to_line()}")
    return 0


def _cmd_list(directory: ContactDirectory) -> int:
    directory.display()
    return 0


def _cmd_search(directory: ContactDirectory, term: str) -> int:
    if not term.strip():
        print("A search term is required.", file=sys.stderr)
        return 1
    results = directory.search(term)
    print(f"Found {len(results)} contact(s):")
    directory.display(results)
    return 0


def _cmd_delete(directory: ContactDirectory, contact_id: int) -> int:
    if not directory.delete(contact_id):
        print(f"Contact {contact_id} not found.", file=sys.stderr)
        return 1
    print(f"Deleted contact {contact_id}.")
    return 0


def _cmd_edit(directory: ContactDirectory, contact_id: int, updates: Dict[str, Any]) -> int:
    if not updates:
        print("Nothing to update. Pass --name, --email, --phone or --notes.", file=sys.stderr)
        return 1
    contact = directory.edit(contact_id, updates)
    if contact is None:
        print(f"Contact {contact_id} was not updated.", file=sys.stderr)
        return 1
    print(f"Updated: {contact.to_line()}")
    return 0


def _cmd_demo(settings: Settings) -> int:
    directory = ContactDirectory(date_format=settings.date_format)

    print("=== Contact Directory ===\n")
    directory.add("Juan Pérez", "juan@email.com", "809-555-1234", "Key client")
    directory.add("María García", "maria@email.com", "809-555-5678", "Supplier")
    directory.add("Carlos López", "carlos@email.com", "809-555-9012")

    print("--- All contacts ---")
    directory.display()

    print('\n--- Search: "maria" ---')
    directory.display(directory.search("maria"))

    print("\n--- Edit first contact ---")
    first = directory.list_contacts()[0]
    directory.edit(first.id, {"phone": "809-555-0000", "notes": "VIP"})
    directory.display()

    print("\n--- Delete second contact ---")
    contacts = directory.list_contacts()
    if len(contacts) > 1:
        directory.delete(contacts[1].id)

    print("\n--- Final contacts ---")
    directory.display()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _configure_logging(args.log_level or settings.log_level, settings.environment)

    if args.command == "demo":
        return _cmd_demo(settings)

    directory = _open_directory(settings)

    if args.command == "add":
        return _cmd_add(directory, args.name, args.email, args.phone, args.notes)
    if args.command == "list":
        return _cmd_list(directory)
    if args.command == "search":
        return _cmd_search(directory, args.term)
    if args.command == "delete":
        return _cmd_delete(directory, args.contact_id)
    if args.command == "edit":
        updates = {
            field: getattr(args, field)
            for field in ("name", "email", "phone", "notes")
            if getattr(args, field) is not None
        }
        return _cmd_edit(directory, args.contact_id, updates)

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
