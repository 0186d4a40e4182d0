"""Vouchman utilities."""

import uuid


def parse_uuid(value) -> uuid.UUID | None:
    """
    Coerce a caller-supplied id to UUID.

    Returns None for anything that is not a UUID, so lookups can report
    "not found" instead of leaking a validation error.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        return None
