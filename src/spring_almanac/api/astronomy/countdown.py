"""
Countdowns

Time remaining until the spring equinox and the start of daylight saving time.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, NamedTuple
from zoneinfo import ZoneInfo

import deal

from ..core.utils import ensure_utc


logger = logging.getLogger(__name__)


__all__ = [
    "Countdown",
    "countdown_to",
    "get_countdowns",
    "next_dst_start",
]

# How far ahead to look for a DST transition
DST_SEARCH_DAYS = 366


class Countdown(NamedTuple):
    """Time remaining until a target instant. All fields are zero once it has passed."""

    target: datetime
    days: int
    hours: int
    minutes: int
    seconds: int
    total_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target.isoformat(),
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "totalMs": self.total_ms,
        }


@deal.post(lambda result: result.total_ms >= 0, message="Countdown cannot be negative")
def countdown_to(target: datetime, now: datetime) -> Countdown:
    """
    Break the time from ``now`` until ``target`` into days, hours, minutes and seconds.

    Args:
        target: Instant being counted down to (naive values are read as UTC)
        now: Current instant

    Returns:
        Countdown, clamped at zero when ``target`` is not in the future
    """
    target = ensure_utc(target)
    remaining = target - ensure_utc(now)
    total_ms = max(0, remaining // timedelta(milliseconds=1))

    seconds_total = total_ms // 1000
    days, rest = divmod(seconds_total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return Countdown(target=target, days=days, hours=hours, minutes=minutes, seconds=seconds, total_ms=total_ms)


def _utc_offset(when: datetime, tz: ZoneInfo) -> timedelta:
    return when.astimezone(tz).utcoffset() or timedelta(0)


def next_dst_start(now: datetime, tz_name: str | ZoneInfo) -> datetime | None:
    """
    Find the next time the zone's UTC offset moves forward (clocks spring ahead).

    Scans a day at a time, then narrows to the hour on which the offset changed.

    Args:
        now: Search start
        tz_name: IANA zone name or ZoneInfo

    Returns:
        UTC instant of the transition, or None if the zone has none within a year
    """
    tz = tz_name if isinstance(tz_name, ZoneInfo) else ZoneInfo(tz_name)
    start = ensure_utc(now).replace(minute=0, second=0, microsecond=0)

    previous = start
    previous_offset = _utc_offset(previous, tz)
    for day in range(1, DST_SEARCH_DAYS + 1):
        current = start + timedelta(days=day)
        offset = _utc_offset(current, tz)
        if offset > previous_offset:
            for hour in range(1, 25):
                candidate = previous + timedelta(hours=hour)
                if _utc_offset(candidate, tz) > previous_offset:
                    return candidate.astimezone(UTC)
        previous, previous_offset = current, offset

    logger.debug(f"No forward UTC offset change for {tz.key} within {DST_SEARCH_DAYS} days")
    return None


def get_countdowns(now: datetime, spring_target: datetime, dst_target: datetime | None) -> dict[str, Any]:
    """
    Countdowns to the spring equinox and DST start.

    ``dst`` is None for zones without daylight saving time.
    """
    return {
        "spring": countdown_to(spring_target, now).to_dict(),
        "dst": countdown_to(dst_target, now).to_dict() if dst_target is not None else None,
    }
