"""Shared validation utilities"""

import re
from typing import Optional

# Basic email validation pattern
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    The address is returned exactly as given: usernames are matched
    case-sensitively, so "A@x.com" and "a@x.com" stay distinct identities.

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email


def validate_required_text(value: Optional[str], field_name: str) -> str:
    """Reject missing or whitespace-only strings"""
    if value is None or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value


def split_display_name(display_name: str) -> tuple[str, str]:
    """
    Split a display name into (first, last).

    The first whitespace-delimited token is the first name and the remainder
    is the last name; a single token yields an empty last name.
    """
    parts = display_name.strip().split(None, 1)
    if not parts:
        return "", ""
    first_name = parts[0]
    last_name = parts[1] if len(parts) > 1 else ""
    return first_name, last_name
