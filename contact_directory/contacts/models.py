"""Contact record and the field rules shared by add and edit."""
from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Dict, List, Optional


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS = ("name", "email", "phone")
MUTABLE_FIELDS = ("name", "email", "phone", "notes")


def is_valid_email(value: Optional[str]) -> bool:
    """Return True when value looks like local-part@domain.tld."""
    if not value:
        return False
    return EMAIL_PATTERN.match(value.strip()) is not None


def format_created_at(today: Optional[date] = None, date_format: Optional[str] = None) -> str:
    """Render the creation date the way a Spanish locale prints it (19/10/2026).

    A strftime pattern in ``date_format`` replaces the default rendering.
    """
    today = today or date.today()
    if date_format:
        return today.strftime(date_format)
    return f"{today.day}/{today.month}/{today.year}"


@dataclass
class Contact:
    """A person in the directory."""
    id: int
    name: str
    email: str
    phone: str
    notes: str = ""
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Contact:
        return cls(
            id=int(data["id"]),
            name=data["name"],
            email=data["email"],
            phone=data["phone"],
            notes=str(data.get("notes") or ""),
            created_at=str(data.get("created_at") or ""),
        )

    def problems(self) -> List[str]:
        """List the reasons this record breaks the field rules, if any."""
        found = []
        for key in REQUIRED_FIELDS:
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                found.append(f"{key} is missing")
        if "email is missing" not in found and not is_valid_email(self.email):
            found.append(f"invalid email {self.email!r}")
        return found

    def to_line(self) -> str:
        """Format the contact as a single display line."""
        return f"ID: {self.id}, Name: {self.name}, Email: {self.email}, Phone: {self.phone}"
