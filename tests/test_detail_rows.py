"""Tests for detail row flattening, submission selection and date display."""
import pytest

from conftest import AS_OF, TZ
from gradebook_server.detail_rows import (
    DETAIL_HEADERS,
    get_detail_rows,
    get_raw_detail_snapshot,
    get_selected_detail,
    graded_points,
    relevant_submission,
)
from gradebook_server.models import StudentNode, SubmissionNode
from gradebook_server.serialize import to_json_dict


def _rows_by_id(rows):
    return {row.assignment_id: row for row in rows}


def test_one_row_per_linked_assignment(tree) -> None:
    rows = get_detail_rows(tree.students["s1"], AS_OF, TZ)
    assert len(rows) == 10
    # Tree order, with the unlinked assignment skipped
    assert [row.assignment_id for row in rows] == [
        "a1", "a2", "a3", "a4", "a5", "a6", "a7", "b1", "b2", "b3",
    ]


def test_student_and_course_fields(tree) -> None:
    rows = _rows_by_id(get_detail_rows(tree.students["s1"], AS_OF, TZ))
    a1 = rows["a1"]
    assert a1.student_id == "s1"
    assert a1.student_preferred_name == "Ava"
    assert a1.course_short_name == "Math 7"
    assert a1.course_period == "2"
    assert a1.teacher_name == "Ms. Lee"
    assert a1.assignment_name == "Fractions   Quiz"
    assert a1.assignment_url == "https://djusd.instructure.com/courses/101/assignments/1"

    b1 = rows["b1"]
    assert b1.course_short_name == "Science 7"
    assert b1.teacher_name == "Mr. Kim"
    assert b1.course_period == "1"


def test_graded_assignment_dates_and_percentage(tree) -> None:
    a5 = _rows_by_id(get_detail_rows(tree.students["s1"], AS_OF, TZ))["a5"]
    assert a5.checkpoint_status == "Graded"
    assert a5.points_graded == 8
    assert a5.points_possible == 10
    assert a5.grade_pct == 80
    assert a5.due_at_iso == "2024-12-15T23:59:00Z"
    # Dates outside the reference year carry a two-digit year
    assert a5.due_at_display == "12/15/24"
    assert a5.submitted_at_display == "12/14/24"
    assert a5.graded_at_display == "1/5"


def test_rows_without_submissions(tree) -> None:
    rows = _rows_by_id(get_detail_rows(tree.students["s1"], AS_OF, TZ))
    a4 = rows["a4"]
    assert a4.points_graded == 0
    assert a4.grade_pct == 0
    assert a4.due_at_iso is None
    assert a4.due_at_display is None
    assert a4.submitted_at_iso is None

    # Zero points possible leaves the percentage undefined
    assert rows["b2"].points_possible == 0
    assert rows["b2"].grade_pct is None


def test_display_dates_without_reference_always_include_year(tree) -> None:
    a2 = _rows_by_id(get_detail_rows(tree.students["s1"], None, TZ))["a2"]
    assert a2.due_at_display == "10/7/25"


def test_display_dates_follow_timezone(tree) -> None:
    # 23:59 Pacific on 10/7 is already 10/8 in UTC
    a2 = _rows_by_id(get_detail_rows(tree.students["s1"], AS_OF))["a2"]
    assert a2.due_at_display == "10/8"


def test_accepts_json_student() -> None:
    rows = get_detail_rows({
        "studentId": "x",
        "meta": {"legalName": "Lee Park"},
        "courses": {
            "c": {
                "canvas": {"name": "Band"},
                "assignments": {
                    "1": {
                        "link": "https://school.example.com/band/1",
                        "pointsPossible": -5,
                        "meta": {"checkpointStatus": "Submitted (Late)"},
                    },
                },
            },
        },
    })
    assert len(rows) == 1
    row = rows[0]
    assert row.student_preferred_name == "Lee Park"
    assert row.course_short_name == "Band"
    assert row.course_period == ""
    assert row.teacher_name == ""
    assert row.assignment_name == "Untitled"
    assert row.assignment_url == "https://school.example.com/band/1"
    assert row.checkpoint_status == "Submitted (Late)"
    assert row.points_possible is None
    assert row.grade_pct is None


def test_relevant_submission_prefers_latest_graded() -> None:
    subs = [
        SubmissionNode("1", score=3, submitted_at="2025-10-01T00:00:00Z"),
        SubmissionNode("2", score=5, submitted_at="2025-09-01T00:00:00Z", graded_at="2025-10-03T00:00:00Z"),
        SubmissionNode("3", score=4, submitted_at="2025-09-15T00:00:00Z", graded_at="2025-10-02T00:00:00Z"),
    ]
    assert relevant_submission(subs).submission_id == "2"


def test_relevant_submission_falls_back_to_latest_submitted_then_first() -> None:
    subs = [
        SubmissionNode("1", submitted_at="2025-09-01T00:00:00Z"),
        SubmissionNode("2", submitted_at="2025-09-05T00:00:00Z"),
    ]
    assert relevant_submission(subs).submission_id == "2"
    assert relevant_submission([SubmissionNode("a"), SubmissionNode("b")]).submission_id == "a"
    assert relevant_submission([]) is None


@pytest.mark.parametrize(
    "submission, expected",
    [
        (None, 0),
        (SubmissionNode("1"), 0),
        (SubmissionNode("1", score=7), 7),
        (SubmissionNode("1", score=7, graded_points=6.5), 6.5),
    ],
)
def test_graded_points(submission, expected) -> None:
    assert graded_points(submission) == expected


def test_selected_detail(tree_dict) -> None:
    selected = get_selected_detail(tree_dict, "s1", AS_OF, TZ)
    assert selected.selected_student_id == "s1"
    assert selected.headers == list(DETAIL_HEADERS)
    assert len(selected.rows) == 10


@pytest.mark.parametrize("student_id", ["nobody", None])
def test_selected_detail_unknown_student(tree, student_id) -> None:
    selected = get_selected_detail(tree, student_id, AS_OF, TZ)
    assert selected.rows == []
    assert selected.selected_student_id == (student_id or "")


def test_wire_names(tree) -> None:
    rows = get_detail_rows(tree.students["s1"], AS_OF, TZ)
    a5 = to_json_dict(rows[4])
    assert a5["dueAtISO"] == "2024-12-15T23:59:00Z"
    assert a5["gradedAtISO"] == "2025-01-05T18:00:00Z"
    assert a5["gradePct"] == 80
    assert a5["coursePeriod"] == "2"

    # Undefined values are omitted
    a4 = to_json_dict(rows[3])
    assert "dueAtISO" not in a4
    assert "dueAtDisplay" not in a4


def test_raw_detail_snapshot(tree) -> None:
    snapshot = get_raw_detail_snapshot(tree, "s1", "c101", "a5")
    assert snapshot["student"]["studentId"] == "s1"
    assert snapshot["course"]["courseId"] == "c101"
    assert snapshot["assignment"].submissions["sub5"].score == 8

    assert get_raw_detail_snapshot(tree, "s1", "c101", "missing") is None
    assert get_raw_detail_snapshot(tree, "s1", "nope", "a5") is None
    assert get_raw_detail_snapshot(tree, "nobody", "c101", "a5") is None


def test_student_node_from_dict_keeps_key_when_id_missing() -> None:
    node = StudentNode.from_dict("k", {"meta": {}})
    assert node.student_id == "k"
    assert node.display_name == "k"
