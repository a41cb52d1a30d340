# ABOUTME: Hourly Window Selector returning the hours of one calendar day in the location's timezone.
# ABOUTME: For "today" only hours after the current local hour are kept; the stored series is never modified.

from collections.abc import Sequence
from datetime import date, datetime

from skycast.clock import CivilDateTime, is_valid_timezone
from skycast.errors import HourlyWindowUnavailable
from skycast.models import HourlyRecord


def select_hours_for_day(
    hourly: Sequence[HourlyRecord] | None,
    tz_name: str | None,
    target_date: date | datetime,
    *,
    now: datetime,
) -> list[HourlyRecord]:
    """Return the records whose local date in tz_name equals target_date.

    target_date may be a plain date (already civil in tz_name, as DailySummary
    dates are) or an aware datetime, which is converted into tz_name first.
    When the target is today in tz_name, only hours strictly after the current
    local hour are returned. An empty result is valid.
    """
    if hourly is None:
        raise HourlyWindowUnavailable("no hourly series is loaded")
    if not is_valid_timezone(tz_name):
        raise HourlyWindowUnavailable(f"cannot select hours without a valid timezone (got {tz_name!r})")

    if isinstance(target_date, datetime):
        if target_date.tzinfo is None:
            raise ValueError("target_date datetime must be timezone-aware")
        target = CivilDateTime.at(target_date, tz_name).date
    else:
        target = target_date

    current = CivilDateTime.at(now, tz_name)
    is_today = current.date == target

    selected = []
    for record in hourly:
        local = CivilDateTime.at(record.instant, tz_name)
        if local.date != target:
            continue
        if is_today and local.hour <= current.hour:
            continue
        selected.append(record)
    return selected
