"""
Weekly grids: one row per course, columns Prior | Mon-Fri | Next | No Date.

The week is anchored on the Monday of ``as_of``'s ISO week in the requested timezone.
A dated assignment lands in at most one bucket:

- before Monday: Prior, but only while it is still Missing
- Monday through Friday: that weekday's column
- after Friday through the following Friday: Next (so this week's Saturday and
  Sunday show up under Next Week rather than disappearing)
- anything later is beyond the grid's horizon and is dropped
"""
from __future__ import annotations

import logging
import typing as t
from datetime import date, timedelta, tzinfo

from .adapter import adapt_student_data, ensure_student_data
from .comparators import name_key
from .dates import (
    SATURDAY,
    SUNDAY,
    format_month_day,
    local_date,
    parse_iso,
    resolve_zone,
    start_of_day,
    week_monday,
    zone_label,
)
from .formatters import format_number
from .grid_items import to_grid_items
from .links import no_date_deep_link
from .models import (
    AttentionType,
    CourseCells,
    CourseRow,
    FormatType,
    GridAssignment,
    GridCheckpointStatus,
    GridCourse,
    GridItem,
    GridItemEntry,
    GridSummary,
    NoDateCell,
    RawAssignment,
    StudentData,
    StudentWeeklyGrid,
    WeeklyGrid,
    WeeklyGridHeader,
    WeeklyGridsResult,
)

log = logging.getLogger(__name__)

WEEKDAY_KEYS = ("Mon", "Tue", "Wed", "Thu", "Fri")

NO_HIGHLIGHT = -1
# Index of the Monday column in the header ("Class Name", "Prior Weeks", "Mon (..)", ...)
MONDAY_COLUMN = 2


def build_columns(monday: date) -> list[str]:
    """The nine header labels for the week starting on ``monday``."""
    weekday_labels = [
        f"{key} ({format_month_day(monday + timedelta(days=offset))})"
        for offset, key in enumerate(WEEKDAY_KEYS)
    ]
    return ["Class Name", "Prior Weeks", *weekday_labels, "Next Week", "No Date"]


def empty_attention_counts() -> dict[str, int]:
    return {attention.value: 0 for attention in AttentionType}


def format_student_header(display_name: str, counts: dict[str, int]) -> str:
    return (
        f"{display_name} — ⚠️:{counts['Warning']} / ❓:{counts['Question']} "
        f"/ 👍:{counts['Thumb']} / ✅:{counts['Check']}"
    )


def get_weekly_grids(
    data: t.Union[StudentData, dict[str, t.Any]],
    as_of: str,
    timezone: t.Optional[str] = None,
    canvas_base_url: t.Optional[str] = None,
    dashboard_base_url: t.Optional[str] = None,
) -> WeeklyGridsResult:
    """Build a weekly grid for every student in the tree.

    Args:
        data: The student tree (built or in JSON form)
        as_of: Reference instant (ISO-8601) that picks the week
        timezone: Optional IANA timezone; UTC when omitted
        canvas_base_url: Canvas origin for assignments lacking a URL (defaults to config)
        dashboard_base_url: Dashboard origin for "no due date" links (defaults to config)

    Returns:
        Mapping of student id to that student's summary and grid

    Raises:
        GridItemValidationError: If an assignment cannot be turned into a grid item
        ValueError: If ``as_of`` or ``timezone`` cannot be parsed
    """
    tree = ensure_student_data(data)
    zone = resolve_zone(timezone)
    monday = week_monday(local_date(as_of, zone))
    columns = build_columns(monday)
    monday_iso = start_of_day(monday, zone).isoformat()
    log.debug("Building weekly grids for %d students, week of %s (%s)",
              len(tree.students), monday.isoformat(), zone_label(timezone))

    result: WeeklyGridsResult = {}
    for student in adapt_student_data(tree, canvas_base_url):
        rows: list[CourseRow] = []
        counts = empty_attention_counts()
        total_items = 0

        for course in student.courses:
            row = build_course_row(
                course, as_of, monday, zone, timezone, student.id, dashboard_base_url
            )
            rows.append(row)
            for key, value in row.summary.attention_counts.items():
                counts[key] += value
            total_items += row.summary.total_items

        result[student.id] = StudentWeeklyGrid(
            summary=GridSummary(attention_counts=counts, total_items=total_items),
            grid=WeeklyGrid(
                header=WeeklyGridHeader(
                    student_header=format_student_header(student.name or student.id, counts),
                    columns=list(columns),
                    monday=monday_iso,
                    timezone=zone_label(timezone),
                ),
                rows=rows,
            ),
        )
    return result


def build_course_row(
    course: GridCourse,
    as_of: str,
    monday: date,
    zone: tzinfo,
    timezone: t.Optional[str],
    student_id: str,
    dashboard_base_url: t.Optional[str] = None,
) -> CourseRow:
    """Partition one course's assignments into buckets and format each bucket."""
    friday = monday + timedelta(days=4)
    next_friday = monday + timedelta(days=11)

    prior: list[GridAssignment] = []
    weekdays: dict[str, list[GridAssignment]] = {key: [] for key in WEEKDAY_KEYS}
    upcoming: list[GridAssignment] = []
    undated: list[GridAssignment] = []

    for assignment in course.assignments:
        if not assignment.due_at:
            undated.append(assignment)
            continue

        due_day = local_date(assignment.due_at, zone)
        if due_day < monday:
            # Earlier weeks only show what still needs doing
            if assignment.checkpoint_status is GridCheckpointStatus.MISSING:
                prior.append(assignment)
        elif due_day <= friday:
            weekdays[WEEKDAY_KEYS[due_day.weekday()]].append(assignment)
        elif due_day <= next_friday:
            upcoming.append(assignment)

    prior_items = _format_bucket(prior, FormatType.PRIOR, as_of, timezone)
    weekday_items = {
        key: _format_bucket(bucket, FormatType.WEEKDAY, as_of, timezone)
        for key, bucket in weekdays.items()
    }
    next_items = _format_bucket(upcoming, FormatType.NEXT, as_of, timezone)

    no_date_points = sum(max(0, assignment.points or 0) for assignment in undated)
    no_date = NoDateCell(
        count=len(undated),
        points=no_date_points,
        label=f"{len(undated)} no due date ({format_number(no_date_points)} points)",
        deep_link_url=no_date_deep_link(student_id, course.id, dashboard_base_url),
    )

    shown: list[GridItem] = list(prior_items)
    for key in WEEKDAY_KEYS:
        shown.extend(weekday_items[key])
    shown.extend(next_items)
    counts = empty_attention_counts()
    for item in shown:
        counts[item.attention_type.value] += 1

    return CourseRow(
        course_id=course.id,
        course_name=course.name,
        cells=CourseCells(prior=prior_items, weekday=weekday_items, next=next_items, no_date=no_date),
        summary=GridSummary(attention_counts=counts, total_items=len(shown)),
    )


def _bucket_sort_key(assignment: GridAssignment) -> tuple[str, tuple[str, str]]:
    return (assignment.due_at or "", name_key(assignment.name))


def _format_bucket(
    bucket: list[GridAssignment],
    format_type: FormatType,
    as_of: str,
    timezone: t.Optional[str],
) -> list[GridItem]:
    if not bucket:
        return []
    entries = [
        GridItemEntry(
            assignment=RawAssignment(
                id=assignment.id,
                name=assignment.name,
                due_at=assignment.due_at,
                points_possible=assignment.points,
                html_url=assignment.url,
            ),
            checkpoint_status=assignment.checkpoint_status,
        )
        for assignment in sorted(bucket, key=_bucket_sort_key)
    ]
    return to_grid_items(entries, format_type, as_of, timezone)


def today_column_index(header: WeeklyGridHeader, as_of: str) -> int:
    """Header column to highlight for the ``as_of`` day.

    Monday-Friday map to columns 2-6; weekends highlight Monday. Returns -1 when
    the header's timezone or ``as_of`` cannot be resolved.
    """
    try:
        zone = resolve_zone(header.timezone)
        weekday = parse_iso(as_of, zone).astimezone(zone).weekday()
    except ValueError:
        log.debug("No column highlight: cannot resolve %r in %r", as_of, header.timezone)
        return NO_HIGHLIGHT
    if weekday in (SATURDAY, SUNDAY):
        return MONDAY_COLUMN
    return MONDAY_COLUMN + weekday
