"""Text-based record identifiers."""

from ulid import ULID


def generate_id() -> str:
    """Generate a text-based record ID (ULID format)."""
    return str(ULID())
