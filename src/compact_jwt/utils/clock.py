"""Wall-clock access for NumericDate claims."""

from __future__ import annotations

import time
from datetime import datetime, timezone

__all__ = [
    "now_seconds",
    "to_numeric_date",
]


def now_seconds() -> int:
    """Current time as whole seconds since the Unix epoch."""
    return int(time.time())


def to_numeric_date(moment: datetime) -> int:
    """Convert a datetime to a NumericDate (RFC 7519 Section 2).

    Naive datetimes are taken as UTC. Moments before the epoch clamp to 0.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return max(0, int(moment.timestamp()))
