"""Time helpers.

Test timestamps are stored as aware UTC datetimes so they serialize with an
explicit offset.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Aware UTC datetime."""
    return datetime.now(timezone.utc)
