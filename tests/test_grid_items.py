"""Tests for the grid item formatter.

Covers title formats, attention classification relative to the last school day,
timezone handling and fail-fast validation.
"""
import typing as t

import pytest

from gradebook_server.errors import GridItemValidationError
from gradebook_server.grid_items import to_grid_items
from gradebook_server.models import (
    AttentionType,
    FormatType,
    GridCheckpointStatus,
    GridItemEntry,
    RawAssignment,
)

TZ = "America/Los_Angeles"
URL = "https://canvas.example.com/courses/1/assignments/1"

MONDAY = "2025-10-06T09:00:00-07:00"
TUESDAY = "2025-10-07T09:00:00-07:00"
WEDNESDAY = "2025-10-08T12:00:00-07:00"
SATURDAY = "2025-10-11T09:00:00-07:00"
SUNDAY = "2025-10-12T09:00:00-07:00"


def entry(
    status: t.Optional[GridCheckpointStatus] = GridCheckpointStatus.DUE,
    due_at: t.Optional[str] = "2025-10-08T23:59:00-07:00",
    name: str = "Homework",
    points: t.Optional[float] = 5,
    assignment_id: str = "1",
    url: t.Optional[str] = URL,
) -> GridItemEntry:
    return GridItemEntry(
        assignment=RawAssignment(
            id=assignment_id,
            name=name,
            due_at=due_at,
            points_possible=points,
            html_url=url,
        ),
        checkpoint_status=status,
    )


def test_missing_due_yesterday_is_question() -> None:
    """Missing work due on the previous school day asks a question rather than warning."""
    items = to_grid_items(
        [entry(GridCheckpointStatus.MISSING, due_at="2025-10-07T23:59:00-07:00")],
        FormatType.WEEKDAY, WEDNESDAY, TZ,
    )
    assert items[0].attention_type is AttentionType.QUESTION


def test_missing_due_earlier_is_warning() -> None:
    items = to_grid_items(
        [entry(GridCheckpointStatus.MISSING, due_at="2025-10-06T23:59:00-07:00")],
        FormatType.WEEKDAY, WEDNESDAY, TZ,
    )
    assert items[0].attention_type is AttentionType.WARNING


@pytest.mark.parametrize("as_of", [SATURDAY, SUNDAY, "2025-10-13T09:00:00-07:00"])
def test_weekend_and_monday_look_back_to_friday(as_of: str) -> None:
    """On Saturday, Sunday and Monday the last school day is the previous Friday."""
    items = to_grid_items(
        [entry(GridCheckpointStatus.MISSING, due_at="2025-10-10T15:00:00-07:00")],
        FormatType.WEEKDAY, as_of, TZ,
    )
    assert items[0].attention_type is AttentionType.QUESTION


def test_tuesday_looks_back_to_monday_only() -> None:
    items = to_grid_items(
        [
            entry(GridCheckpointStatus.MISSING, due_at="2025-10-06T15:00:00-07:00", assignment_id="mon"),
            entry(GridCheckpointStatus.MISSING, due_at="2025-10-03T15:00:00-07:00", assignment_id="fri"),
        ],
        FormatType.WEEKDAY, TUESDAY, TZ,
    )
    assert [item.attention_type for item in items] == [AttentionType.QUESTION, AttentionType.WARNING]


def test_status_classification() -> None:
    statuses = [
        GridCheckpointStatus.SUBMITTED,
        GridCheckpointStatus.GRADED,
        GridCheckpointStatus.DUE,
        None,
    ]
    items = to_grid_items(
        [entry(status, assignment_id=str(i)) for i, status in enumerate(statuses)],
        FormatType.WEEKDAY, MONDAY, TZ,
    )
    assert [item.attention_type for item in items] == [
        AttentionType.CHECK,
        AttentionType.CHECK,
        AttentionType.THUMB,
        AttentionType.WARNING,
    ]


def test_prior_title_collapses_whitespace() -> None:
    items = to_grid_items(
        [entry(GridCheckpointStatus.MISSING, due_at="2025-10-02T23:59:00-07:00", name="  Fractions   Quiz ",
               points=10)],
        FormatType.PRIOR, WEDNESDAY, TZ,
    )
    assert items[0].title == "10/2: Fractions Quiz (10)"


def test_weekday_title_has_no_date() -> None:
    items = to_grid_items([entry(points=2.5)], FormatType.WEEKDAY, WEDNESDAY, TZ)
    assert items[0].title == "Homework (2.5)"


def test_next_title_uses_local_weekday() -> None:
    """A late-evening Pacific due date is already the next day in UTC."""
    due = "2025-10-14T02:00:00Z"
    local = to_grid_items([entry(due_at=due)], FormatType.NEXT, WEDNESDAY, TZ)
    utc = to_grid_items([entry(due_at=due)], FormatType.NEXT, WEDNESDAY)
    assert local[0].title == "Mon: Homework (5)"
    assert utc[0].title == "Tue: Homework (5)"


def test_undated_item_falls_back_to_weekday_title() -> None:
    items = to_grid_items([entry(due_at=None)], FormatType.NEXT, WEDNESDAY, TZ)
    assert items[0].title == "Homework (5)"
    assert items[0].due_at is None


def test_points_are_clamped_and_optional() -> None:
    items = to_grid_items(
        [entry(points=-3, assignment_id="neg"), entry(points=None, assignment_id="none")],
        FormatType.WEEKDAY, WEDNESDAY, TZ,
    )
    assert items[0].points == 0
    assert items[0].title == "Homework (0)"
    assert items[1].points is None
    assert items[1].title == "Homework (0)"


def test_integral_float_points_render_without_decimal() -> None:
    items = to_grid_items([entry(points=5.0)], FormatType.WEEKDAY, WEDNESDAY, TZ)
    assert items[0].title == "Homework (5)"


def test_preserves_length_and_order() -> None:
    entries = [entry(assignment_id=str(i), name=f"Item {i}") for i in range(5)]
    items = to_grid_items(entries, FormatType.WEEKDAY, WEDNESDAY, TZ)
    assert [item.id for item in items] == ["0", "1", "2", "3", "4"]


def test_format_type_accepts_string() -> None:
    items = to_grid_items([entry()], "Next", WEDNESDAY, TZ)
    assert items[0].title == "Wed: Homework (5)"


def test_empty_batch() -> None:
    assert to_grid_items([], FormatType.PRIOR, WEDNESDAY, TZ) == []


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"assignment_id": "   "}, "Assignment ID is required and cannot be empty"),
        ({"url": None}, "Assignment 1 html_url is required"),
        ({"url": "ftp://files.example.com/a"}, "Assignment 1 URL must start with http:// or https://"),
    ],
)
def test_validation_errors(kwargs: dict, message: str) -> None:
    with pytest.raises(GridItemValidationError, match=message):
        to_grid_items([entry(**kwargs)], FormatType.WEEKDAY, WEDNESDAY, TZ)


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        to_grid_items([entry(url="not-a-url")], FormatType.WEEKDAY, WEDNESDAY, TZ)


def test_unknown_timezone_raises() -> None:
    with pytest.raises(ValueError, match="Unknown timezone"):
        to_grid_items([entry()], FormatType.WEEKDAY, WEDNESDAY, "Mars/Olympus_Mons")


def test_entry_from_dict() -> None:
    parsed = GridItemEntry.from_dict({
        "assignment": {"id": "9", "name": "Essay", "due_at": None, "points_possible": 20, "html_url": URL},
        "checkpointStatus": "Submitted",
    })
    assert parsed.checkpoint_status is GridCheckpointStatus.SUBMITTED
    assert parsed.assignment.points_possible == 20
    assert parsed.assignment.due_at is None
