"""Staleness policy."""

from __future__ import annotations

from datetime import datetime, timedelta


def staleness_cutoff(now: datetime, window: timedelta) -> datetime:
    return now - window


def is_fresh(position_time: datetime | None, now: datetime, window: timedelta) -> bool:
    """Whether a position reported at *position_time* is inside the trailing window.

    The boundary is exclusive: a report exactly ``window`` old is stale.
    """
    if position_time is None:
        return False
    return position_time > staleness_cutoff(now, window)
