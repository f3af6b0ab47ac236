"""
Detail rows: one flat row per (course, assignment) for a single student.

No filtering or sorting happens here beyond dropping assignments that have no
usable link; the table on top of these rows does its own sorting and filtering.
"""
from __future__ import annotations

import logging
import typing as t

from .adapter import ensure_student_data
from .dates import format_display_date, resolve_zone, try_parse_iso
from .formatters import percent_of
from .links import is_http_url
from .models import (
    AssignmentNode,
    DetailRow,
    SelectedDetail,
    StudentData,
    StudentNode,
    SubmissionNode,
)

log = logging.getLogger(__name__)

# Column labels, in table order
DETAIL_HEADERS = (
    "Student",
    "Course",
    "Teacher",
    "Assignment",
    "Status",
    "Points",
    "Grade",
    "%",
    "Due",
    "Turned in",
    "Graded on",
)


def detail_url(assignment: AssignmentNode) -> t.Optional[str]:
    """Canvas ``html_url``, else ``link`` when it is an http(s) URL, else None."""
    if assignment.html_url:
        return assignment.html_url
    if is_http_url(assignment.link):
        return assignment.link
    return None


def relevant_submission(submissions: t.Iterable[SubmissionNode]) -> t.Optional[SubmissionNode]:
    """Most recently graded submission, else most recently submitted, else the first one."""
    submissions = list(submissions)
    if not submissions:
        return None

    graded = [s for s in submissions if s.graded_at]
    if graded:
        return max(graded, key=lambda s: s.graded_at)

    submitted = [s for s in submissions if s.submitted_at]
    if submitted:
        return max(submitted, key=lambda s: s.submitted_at)

    return submissions[0]


def graded_points(submission: t.Optional[SubmissionNode]) -> float:
    if submission is None:
        return 0
    if submission.graded_points is not None:
        return submission.graded_points
    if submission.score is not None:
        return submission.score
    return 0


def get_detail_rows(
    student: t.Union[StudentNode, dict[str, t.Any]],
    now_iso: t.Optional[str] = None,
    timezone: t.Optional[str] = None,
) -> list[DetailRow]:
    """Flatten one student's courses and assignments into detail rows.

    Args:
        student: A single student node (built or in JSON form)
        now_iso: Reference instant for date display; dates in its year render as
                 "M/D", others as "M/D/YY". Without it every date carries its year.
        timezone: Optional IANA timezone for date display; UTC when omitted

    Returns:
        One row per assignment with a usable link, in tree order
    """
    if not isinstance(student, StudentNode):
        student = StudentNode.from_dict(str(student.get("studentId") or ""), student)
    zone = resolve_zone(timezone)

    reference = try_parse_iso(now_iso, zone)
    reference_year = reference.astimezone(zone).year if reference is not None else None

    student_name = student.display_name
    rows: list[DetailRow] = []

    for course in student.courses.values():
        course_name = course.display_name
        teacher_name = course.teacher_name
        course_period = course.meta.period or ""

        for assignment in course.assignments.values():
            url = detail_url(assignment)
            if not url:
                log.debug("Skipping assignment %s in course %s: no usable link",
                          assignment.assignment_id, course.course_id)
                continue

            points_possible = assignment.points
            if points_possible is not None and points_possible < 0:
                points_possible = None

            submission = relevant_submission(assignment.submissions.values())
            points_graded = graded_points(submission)
            grade_pct = percent_of(points_graded, points_possible or 0)

            due_at = assignment.due_at or None
            submitted_at = submission.submitted_at if submission else None
            graded_at = submission.graded_at if submission else None

            rows.append(
                DetailRow(
                    student_id=student.student_id,
                    student_preferred_name=student_name,
                    course_id=course.course_id,
                    course_short_name=course_name,
                    course_period=course_period,
                    teacher_name=teacher_name,
                    assignment_id=assignment.assignment_id,
                    assignment_name=assignment.name,
                    assignment_url=url,
                    checkpoint_status=assignment.meta.checkpoint_status,
                    points_graded=points_graded,
                    points_possible=points_possible,
                    grade_pct=grade_pct,
                    due_at_iso=due_at,
                    submitted_at_iso=submitted_at,
                    graded_at_iso=graded_at,
                    due_at_display=format_display_date(due_at, reference_year, zone),
                    submitted_at_display=format_display_date(submitted_at, reference_year, zone),
                    graded_at_display=format_display_date(graded_at, reference_year, zone),
                )
            )

    return rows


def get_selected_detail(
    data: t.Union[StudentData, dict[str, t.Any]],
    student_id: t.Optional[str],
    now_iso: t.Optional[str] = None,
    timezone: t.Optional[str] = None,
) -> SelectedDetail:
    """Detail rows for the selected student, with the fixed header labels.

    An unknown or missing student yields no rows rather than an error.
    """
    tree = ensure_student_data(data)
    student = tree.students.get(student_id) if student_id else None
    rows = get_detail_rows(student, now_iso, timezone) if student is not None else []
    return SelectedDetail(rows=rows, selected_student_id=student_id or "", headers=list(DETAIL_HEADERS))


def get_raw_detail_snapshot(
    data: t.Union[StudentData, dict[str, t.Any]],
    student_id: str,
    course_id: str,
    assignment_id: str,
) -> t.Optional[dict[str, t.Any]]:
    """The raw student/course/assignment nodes behind one detail row, or None if any is missing."""
    tree = ensure_student_data(data)
    student = tree.students.get(student_id)
    if student is None:
        return None
    course = student.courses.get(course_id)
    if course is None:
        return None
    assignment = course.assignments.get(assignment_id)
    if assignment is None:
        return None

    return {
        "student": {"studentId": student.student_id, "meta": student.meta},
        "course": {"courseId": course.course_id, "meta": course.meta, "canvas": course.canvas},
        "assignment": assignment,
    }
