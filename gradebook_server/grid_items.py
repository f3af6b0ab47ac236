"""
Batched conversion of (assignment, checkpoint status) pairs into weekly grid items.

Everything that depends only on ``as_of`` (its local weekday and the reference day
used to spot "due on the last school day" items) is computed once per call.
"""
from __future__ import annotations

import logging
import typing as t
from datetime import date, timedelta, tzinfo

from .dates import (
    SATURDAY,
    SUNDAY,
    format_month_day,
    local_date,
    previous_friday,
    resolve_zone,
    weekday_abbreviation,
)
from .errors import GridItemValidationError
from .formatters import format_number
from .links import is_http_url
from .models import AttentionType, FormatType, GridCheckpointStatus, GridItem, GridItemEntry

log = logging.getLogger(__name__)

MONDAY = 0

# On these days "yesterday" is not a school day, so the last school day is Friday
_LOOKBACK_TO_FRIDAY = {SATURDAY, SUNDAY, MONDAY}


def to_grid_items(
    entries: t.Sequence[GridItemEntry],
    format_type: t.Union[FormatType, str],
    as_of: str,
    timezone: t.Optional[str] = None,
) -> list[GridItem]:
    """Convert a batch of assignments into grid items, preserving length and order.

    Args:
        entries: Assignment + checkpoint status pairs
        format_type: How to build titles: Prior ("M/d: name (pts)"), Weekday
                     ("name (pts)") or Next ("EEE: name (pts)")
        as_of: Reference instant (ISO-8601)
        timezone: Optional IANA timezone; UTC when omitted

    Returns:
        One GridItem per entry, in input order

    Raises:
        GridItemValidationError: If an entry has an empty id or a missing/non-http(s) URL
        ValueError: If ``as_of`` or ``timezone`` cannot be parsed
    """
    format_type = FormatType(format_type)
    zone = resolve_zone(timezone)
    log.debug("Formatting %d %s grid items as of %s", len(entries), format_type.value, as_of)

    as_of_day = local_date(as_of, zone)
    last_friday = previous_friday(as_of_day)
    yesterday = as_of_day - timedelta(days=1)
    reference_day = last_friday if as_of_day.weekday() in _LOOKBACK_TO_FRIDAY else yesterday

    return [_to_grid_item(entry, format_type, zone, reference_day) for entry in entries]


def _to_grid_item(
    entry: GridItemEntry,
    format_type: FormatType,
    zone: tzinfo,
    reference_day: date,
) -> GridItem:
    assignment = entry.assignment

    if not assignment.id or not assignment.id.strip():
        raise GridItemValidationError("Assignment ID is required and cannot be empty")

    url = assignment.html_url
    if not url:
        raise GridItemValidationError(f"Assignment {assignment.id} html_url is required", assignment.id)
    if not is_http_url(url):
        raise GridItemValidationError(
            f"Assignment {assignment.id} URL must start with http:// or https://", assignment.id
        )

    points = None
    if assignment.points_possible is not None:
        points = max(0, assignment.points_possible)

    due_day = local_date(assignment.due_at, zone) if assignment.due_at else None
    name = " ".join((assignment.name or "").split())
    label = f"{name} ({format_number(points)})"

    if format_type is FormatType.PRIOR and due_day is not None:
        title = f"{format_month_day(due_day)}: {label}"
    elif format_type is FormatType.NEXT and due_day is not None:
        title = f"{weekday_abbreviation(due_day)}: {label}"
    else:
        title = label

    return GridItem(
        id=assignment.id,
        title=title,
        url=url,
        attention_type=attention_type(entry.checkpoint_status, due_day, reference_day),
        due_at=assignment.due_at or None,
        points=points,
    )


def attention_type(
    status: t.Optional[GridCheckpointStatus],
    due_day: t.Optional[date],
    reference_day: date,
) -> AttentionType:
    """Classify how much attention an item needs.

    Submitted/Graded -> Check, Due -> Thumb, Missing and due on the last school
    day -> Question, any other Missing or unknown status -> Warning.
    """
    status = GridCheckpointStatus.parse(status)
    if status in (GridCheckpointStatus.SUBMITTED, GridCheckpointStatus.GRADED):
        return AttentionType.CHECK
    if status is GridCheckpointStatus.DUE:
        return AttentionType.THUMB
    if status is GridCheckpointStatus.MISSING and due_day is not None and due_day == reference_day:
        return AttentionType.QUESTION
    return AttentionType.WARNING
