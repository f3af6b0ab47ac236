"""
Timezone-aware date helpers shared by the grid, detail and progress views.

All week math happens on calendar dates in the caller's IANA timezone: an instant
is converted to local wall time first and only then truncated to a day.
"""
from __future__ import annotations

import typing as t
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


UTC = timezone.utc

WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

SATURDAY = 5
SUNDAY = 6


def resolve_zone(name: t.Optional[str]) -> tzinfo:
    """Resolve an IANA timezone name; None (or "UTC") means UTC.

    Raises:
        ValueError: If the name is not a known timezone.
    """
    if name is None or name.strip().upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name!r}") from exc


def zone_label(name: t.Optional[str]) -> str:
    return name.strip() if name and name.strip() else "UTC"


def parse_iso(value: str, zone: tzinfo = UTC) -> datetime:
    """Parse an ISO-8601 string into an aware datetime.

    Strings without an offset (including bare dates) are read as wall time in ``zone``.

    Raises:
        ValueError: If the value is not an ISO-8601 date or datetime.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO datetime string, got: {value!r}")
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def try_parse_iso(value: t.Optional[str], zone: tzinfo = UTC) -> t.Optional[datetime]:
    if not value:
        return None
    try:
        return parse_iso(value, zone)
    except ValueError:
        return None


def local_datetime(value: str, zone: tzinfo) -> datetime:
    return parse_iso(value, zone).astimezone(zone)


def local_date(value: str, zone: tzinfo) -> date:
    return local_datetime(value, zone).date()


def week_monday(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def previous_friday(day: date) -> date:
    """Most recent Friday on or before ``day`` (Sat -> 1 day back, Mon -> 3 days back)."""
    return day - timedelta(days=(day.weekday() - 4) % 7)


def start_of_day(day: date, zone: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=zone)


def format_month_day(day: date) -> str:
    return f"{day.month}/{day.day}"


def weekday_abbreviation(day: date) -> str:
    return WEEKDAY_ABBREVIATIONS[day.weekday()]


def format_display_date(
    value: t.Optional[str],
    reference_year: t.Optional[int],
    zone: tzinfo = UTC,
) -> t.Optional[str]:
    """Render an ISO instant as "M/D" in the reference year, otherwise "M/D/YY".

    Without a reference year the two-digit year is always included. Unparseable
    values yield None rather than an error.
    """
    parsed = try_parse_iso(value, zone)
    if parsed is None:
        return None
    local = parsed.astimezone(zone)
    if reference_year is not None and local.year == reference_year:
        return f"{local.month}/{local.day}"
    return f"{local.month}/{local.day}/{local.year % 100:02d}"


def utc_now_iso() -> str:
    """Current instant as ISO-8601, used by the CLI and service to default ``as_of``."""
    return datetime.now(UTC).isoformat()
