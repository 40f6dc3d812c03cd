"""Utility functions."""

from app.utils.anonymous_id import (
    generate_anonymous_id,
    hash_for_privacy,
    validate_anonymous_id,
)
from app.utils.time import format_datetime, utc_now

__all__ = [
    "utc_now",
    "format_datetime",
    "generate_anonymous_id",
    "validate_anonymous_id",
    "hash_for_privacy",
]
