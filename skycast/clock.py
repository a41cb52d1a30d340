# ABOUTME: Injectable clock and the civil date/time value type used for zone-aware comparisons.
# ABOUTME: Every "now" lookup and every instant-to-local conversion in the pipeline goes through here.

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from skycast.errors import InvalidTimezone


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to one instant, moved only by advance(). Used by tests."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware instant")
        self._instant = instant.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs) -> None:
        self._instant += timedelta(**kwargs)


def load_zone(tz_name: str | None) -> ZoneInfo:
    """Load an IANA zone, raising InvalidTimezone for empty or unknown ids."""
    if not tz_name:
        raise InvalidTimezone("timezone is empty")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezone(f"unknown timezone: {tz_name!r}") from e


def is_valid_timezone(tz_name: str | None) -> bool:
    try:
        load_zone(tz_name)
    except InvalidTimezone:
        return False
    return True


@dataclass(frozen=True, order=True)
class CivilDateTime:
    """A wall-clock reading (date, hour, minute) as observed in one timezone.

    Ordering and equality are on the civil fields only, so two values are only
    meaningfully comparable when they were taken in the same zone.
    """

    date: date
    hour: int
    minute: int = 0

    @classmethod
    def at(cls, instant: datetime, tz_name: str) -> "CivilDateTime":
        if instant.tzinfo is None:
            raise ValueError("instant must be timezone-aware")
        local = instant.astimezone(load_zone(tz_name))
        return cls(date=local.date(), hour=local.hour, minute=local.minute)

    def hhmm(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"
