"""Shared utilities used across the scheduling engine."""

import re
import uuid


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("(555) 123-4567")
        '5551234567'
        >>> normalize_phone("+1 (555) 123-4567")
        '+15551234567'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def new_id(prefix: str) -> str:
    """Return a collision-resistant identifier such as ``booking-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"
