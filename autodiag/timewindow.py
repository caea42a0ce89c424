"""Resolve the time window shared by all datasource fetches."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigError, InvalidTimeRangeError
from .types import TimeWindow

DEFAULT_DURATION_SECONDS = 3600
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def load_time_zone(name: str | None) -> tzinfo:
    """Return the zone called ``name`` or UTC when ``name`` is empty."""

    if not name:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"unknown time zone: {name}") from exc


def parse_local_time(text: str, time_zone: tzinfo) -> datetime:
    """Parse ``text`` as wall-clock time in ``time_zone``."""

    try:
        naive = datetime.strptime(text, TIME_FORMAT)
    except ValueError as exc:
        raise ConfigError(
            f"invalid time {text!r}, expected format {TIME_FORMAT}"
        ) from exc
    return naive.replace(tzinfo=time_zone)


def _aware(value: datetime, time_zone: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=time_zone)
    return value


def resolve_window(
    now: datetime,
    *,
    duration: float | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    time_zone: tzinfo = UTC,
    default_duration: float = DEFAULT_DURATION_SECONDS,
) -> TimeWindow:
    """Return the ``TimeWindow`` for a run.

    An explicit ``start``/``end`` pair wins over ``duration``. Naive
    datetimes are read as wall-clock time in ``time_zone``; the comparison
    itself does not depend on the zone, which is kept for display only.
    Without an explicit pair the window trails ``now`` by ``duration``
    seconds, falling back to ``default_duration``.
    """

    if (start is None) != (end is None):
        raise InvalidTimeRangeError("both start and end must be provided")

    if start is not None and end is not None:
        start = _aware(start, time_zone)
        end = _aware(end, time_zone)
    else:
        seconds = default_duration if duration is None else duration
        if seconds <= 0:
            raise InvalidTimeRangeError(
                f"duration must be positive, got {seconds}"
            )
        end = _aware(now, time_zone)
        start = end - timedelta(seconds=seconds)

    if start >= end:
        raise InvalidTimeRangeError(
            f"start {start.isoformat()} is not before end {end.isoformat()}"
        )
    return TimeWindow(
        start=start.astimezone(time_zone),
        end=end.astimezone(time_zone),
        time_zone=time_zone,
    )


__all__ = [
    "DEFAULT_DURATION_SECONDS",
    "TIME_FORMAT",
    "load_time_zone",
    "parse_local_time",
    "resolve_window",
]
