"""Shared utility functions."""
from datetime import datetime, timezone


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def package_key(package_id: str) -> str:
    """Return the case-insensitive lookup key for a package id."""
    return package_id.casefold()
