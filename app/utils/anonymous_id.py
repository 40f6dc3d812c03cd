"""Anonymous user identifiers.

An anonymous ID is the UTC submission hour (``YYYYMMDDHH``) followed by
12 lowercase hex characters, e.g. ``2025092410abcdef123456``. It is the
only key linking a submitter's results across requests.
"""

import hashlib
import re
import secrets
from datetime import datetime, timezone

from app.utils.time import utc_now

ANONYMOUS_ID_LENGTH = 22
ANONYMOUS_ID_PATTERN = re.compile(r"^[0-9]{10}[a-f0-9]{12}$")


def generate_anonymous_id(now: datetime | None = None) -> str:
    """Generate a new anonymous user ID."""
    timestamp = (now or utc_now()).astimezone(timezone.utc).strftime("%Y%m%d%H")
    return f"{timestamp}{secrets.token_hex(6)}"


def validate_anonymous_id(anonymous_id: object) -> bool:
    """Check that a value is a well-formed anonymous ID."""
    if not isinstance(anonymous_id, str) or len(anonymous_id) != ANONYMOUS_ID_LENGTH:
        return False
    return ANONYMOUS_ID_PATTERN.match(anonymous_id) is not None


def extract_timestamp(anonymous_id: str) -> datetime | None:
    """Recover the hour an anonymous ID was issued, or None if invalid."""
    if not validate_anonymous_id(anonymous_id):
        return None
    try:
        return datetime.strptime(anonymous_id[:10], "%Y%m%d%H").replace(
            tzinfo=timezone.utc
        )
    except ValueError:
        return None


def generate_session_token() -> str:
    """Random token for a temporary test-taking session."""
    return secrets.token_hex(16)


def hash_for_privacy(data: str) -> str:
    """One-way SHA256 hash for IP addresses and user agents."""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()
