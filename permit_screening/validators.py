"""Input validation shared by the screening engine and the watchlist API.

Validation happens before any store query so that a malformed identity
can never come back as a clean screening.
"""

import re

from permit_screening.errors import InvalidInput


def validate_national_id(national_id: str, pattern: str) -> str:
    """Return the stripped national id, or raise InvalidInput."""
    if national_id is None or not national_id.strip():
        raise InvalidInput("national_id must not be empty")
    national_id = national_id.strip()
    if not re.fullmatch(pattern, national_id):
        raise InvalidInput(f"national_id '{national_id}' is malformed")
    return national_id


def require_text(value: str, field_name: str) -> str:
    """Return the stripped value, or raise InvalidInput if blank."""
    if value is None or not value.strip():
        raise InvalidInput(f"{field_name} must not be empty")
    return value.strip()
