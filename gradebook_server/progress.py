"""
Progress table rollup: student -> courses -> status groups -> assignments.
"""
from __future__ import annotations

import logging
import typing as t

from .adapter import ensure_student_data
from .comparators import assignment_sort_key, course_sort_key, status_rank, UNKNOWN_PERIOD
from .dates import try_parse_iso
from .formatters import format_percentage
from .models import (
    AssignmentNode,
    CourseNode,
    CourseProgress,
    ProgressTableData,
    StatusGroupProgress,
    StudentData,
    StudentNode,
)

log = logging.getLogger(__name__)

VECTOR_TYPE = "Vector"

# Statuses that count toward the rollup regardless of due date
TURNED_IN_STATUSES = frozenset({"Graded", "Submitted", "Submitted (Late)"})

# Statuses whose earned points count toward the earned total
EARNING_STATUSES = frozenset({"Graded", "Submitted"})


def is_progress_assignment(assignment: AssignmentNode, as_of: t.Optional[str] = None) -> bool:
    """Whether an assignment belongs in the progress rollup.

    Vector assignments never do. Turned-in work always does. Missing work only
    counts once its due date has passed (relative to ``as_of``; with no ``as_of``
    any dated Missing assignment counts). Due, Locked, Closed and undated items
    stay out.
    """
    if assignment.meta.assignment_type == VECTOR_TYPE:
        return False

    status = assignment.meta.checkpoint_status
    if status in TURNED_IN_STATUSES:
        return True
    if status != "Missing":
        return False

    due = try_parse_iso(assignment.due_at)
    if due is None:
        return False
    if as_of is None:
        return True
    reference = try_parse_iso(as_of)
    return reference is not None and due < reference


def get_progress_assignments(
    student: StudentNode,
    as_of: t.Optional[str] = None,
) -> list[tuple[CourseNode, AssignmentNode]]:
    """Every eligible (course, assignment) pair for one student, in tree order."""
    return [
        (course, assignment)
        for course in student.courses.values()
        for assignment in course.assignments.values()
        if is_progress_assignment(assignment, as_of)
    ]


def _new_course_progress(course: CourseNode) -> CourseProgress:
    period = course.meta.period_number
    return CourseProgress(
        course_id=course.course_id,
        course_name=course.display_name,
        course_short_name=course.display_name,
        teacher_name=course.teacher_name,
        period=period if period is not None else UNKNOWN_PERIOD,
    )


def select_progress_table_rows(
    data: t.Union[StudentData, dict[str, t.Any]],
    student_id: str,
    as_of: t.Optional[str] = None,
) -> t.Optional[ProgressTableData]:
    """Group a student's eligible assignments by course, then by status.

    Args:
        data: The student tree (built or in JSON form)
        student_id: Which student to roll up
        as_of: Reference instant deciding whether Missing work is past due

    Returns:
        The rollup, or None when the student is not in the tree
    """
    tree = ensure_student_data(data)
    student = tree.students.get(student_id)
    if student is None:
        return None

    pairs = get_progress_assignments(student, as_of)
    log.debug("Progress rollup for %s: %d eligible assignments", student_id, len(pairs))

    courses: dict[str, CourseProgress] = {}
    groups: dict[tuple[str, str], StatusGroupProgress] = {}
    course_nodes: dict[str, CourseNode] = {}

    for course, assignment in pairs:
        progress = courses.get(course.course_id)
        if progress is None:
            progress = courses[course.course_id] = _new_course_progress(course)
            course_nodes[course.course_id] = course

        status = assignment.meta.checkpoint_status or "Unknown"
        group = groups.get((course.course_id, status))
        if group is None:
            group = groups[(course.course_id, status)] = StatusGroupProgress(status=status)
            progress.status_groups.append(group)

        possible = assignment.points or 0
        earned = assignment.meta.checkpoint_earned_points if status in EARNING_STATUSES else 0

        for bucket in (progress, group):
            bucket.assignment_count += 1
            bucket.total_possible += possible
            bucket.total_earned += earned
        group.assignments.append(assignment)

    for progress in courses.values():
        progress.percentage = format_percentage(progress.total_earned, progress.total_possible)
        progress.status_groups.sort(key=lambda g: status_rank(g.status))
        for group in progress.status_groups:
            group.percentage = format_percentage(group.total_earned, group.total_possible)
            group.assignments.sort(key=assignment_sort_key)

    ordered = sorted(courses.values(), key=lambda c: course_sort_key(course_nodes[c.course_id]))

    total_earned = sum(c.total_earned for c in ordered)
    total_possible = sum(c.total_possible for c in ordered)
    return ProgressTableData(
        student_id=student.student_id,
        student_name=student.display_name,
        total_earned=total_earned,
        total_possible=total_possible,
        total_percentage=format_percentage(total_earned, total_possible),
        total_assignments=sum(c.assignment_count for c in ordered),
        courses=ordered,
    )
