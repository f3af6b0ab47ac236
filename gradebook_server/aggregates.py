"""
Per-course point rollups and the radial (ring chart) view built on them.
"""
from __future__ import annotations

import logging
import typing as t
from collections import Counter

from .adapter import ensure_student_data
from .comparators import UNKNOWN_PERIOD, name_key
from .formatters import clamp_percent
from .models import (
    CourseAggregate,
    CourseNode,
    OverallProgress,
    RadialSegment,
    RadialView,
    StudentData,
    StudentNode,
)
from .progress import VECTOR_TYPE

log = logging.getLogger(__name__)

BUCKETS = ("Earned", "Submitted", "Missing", "Lost")

BUCKET_COLORS = {
    "Earned": "#22c55e",
    "Submitted": "#3b82f6",
    "Missing": "#ef4444",
    "Lost": "#0f172a",
}


def turned_in_percentage(total: float, earned: float, submitted: float, lost: float) -> int:
    """Share of points already handed in; nothing to hand in counts as 100%."""
    if total <= 0:
        return 100
    return clamp_percent((earned + submitted + lost) / total * 100)


def calculate_course_aggregate(course: CourseNode) -> CourseAggregate:
    assignments = [
        a for a in course.assignments.values() if a.meta.assignment_type != VECTOR_TYPE
    ]

    total = earned = submitted = missing = lost = 0
    for assignment in assignments:
        total += assignment.points or 0
        earned += assignment.meta.checkpoint_earned_points
        submitted += assignment.meta.checkpoint_submitted_points
        missing += assignment.meta.checkpoint_missing_points
        lost += assignment.meta.checkpoint_lost_points

    period = course.meta.period_number
    return CourseAggregate(
        course_id=course.course_id,
        course_name=course.display_name,
        teacher=course.teacher_name,
        period=period if period is not None else UNKNOWN_PERIOD,
        total_assignments=len(assignments),
        total_points=total,
        earned_points=earned,
        submitted_points=submitted,
        missing_points=missing,
        lost_points=lost,
        turned_in_percentage=turned_in_percentage(total, earned, submitted, lost),
        status_counts=dict(Counter(a.meta.checkpoint_status for a in assignments)),
    )


def calculate_student_course_aggregates(
    data: t.Union[StudentData, dict[str, t.Any]],
    student_id: str,
) -> list[CourseAggregate]:
    """Aggregates for each of a student's courses, by period then course name.

    An unknown student yields an empty list.
    """
    tree = ensure_student_data(data)
    student = tree.students.get(student_id)
    if student is None:
        log.debug("No aggregates: student %s not in tree", student_id)
        return []
    aggregates = [calculate_course_aggregate(course) for course in student.courses.values()]
    return sorted(aggregates, key=lambda a: (a.period, name_key(a.course_name)))


def calculate_overall_progress(aggregates: t.Sequence[CourseAggregate]) -> OverallProgress:
    total = sum(a.total_points for a in aggregates)
    earned = sum(a.earned_points for a in aggregates)
    submitted = sum(a.submitted_points for a in aggregates)
    lost = sum(a.lost_points for a in aggregates)
    return OverallProgress(
        total_courses=len(aggregates),
        total_assignments=sum(a.total_assignments for a in aggregates),
        total_points=total,
        earned_points=earned,
        submitted_points=submitted,
        missing_points=sum(a.missing_points for a in aggregates),
        lost_points=lost,
        turned_in_percentage=turned_in_percentage(total, earned, submitted, lost),
    )


def buckets_for_course(student: StudentNode, course_id: str) -> dict[str, float]:
    """Earned/Submitted/Missing/Lost points for one course, Vector work excluded.

    Graded work contributes its earned points and the points it lost; Submitted
    and Missing work contribute their own rollups. Other statuses contribute nothing.
    """
    buckets = {label: 0 for label in BUCKETS}
    course = student.courses.get(course_id)
    if course is None:
        return buckets

    for assignment in course.assignments.values():
        meta = assignment.meta
        if meta.assignment_type == VECTOR_TYPE:
            continue
        if meta.checkpoint_status == "Graded":
            buckets["Earned"] += meta.checkpoint_earned_points
            buckets["Lost"] += meta.checkpoint_lost_points
        elif meta.checkpoint_status == "Submitted":
            buckets["Submitted"] += meta.checkpoint_submitted_points
        elif meta.checkpoint_status == "Missing":
            buckets["Missing"] += meta.checkpoint_missing_points
    return buckets


def radial_view_from_buckets(buckets: dict[str, float]) -> RadialView:
    """Ring segments normalised to 100 plus the turned-in share at the center."""
    total = max(0, sum(buckets.get(label, 0) for label in BUCKETS))
    center = clamp_percent((total - buckets.get("Missing", 0)) / total * 100) if total > 0 else 0
    denominator = total if total > 0 else 1
    segments = [
        RadialSegment(
            label=label,
            color=BUCKET_COLORS[label],
            points=buckets.get(label, 0),
            percentage=buckets.get(label, 0) / denominator * 100,
        )
        for label in BUCKETS
    ]
    return RadialView(segments=segments, center_percent=center)


def radial_view_for_course(
    data: t.Union[StudentData, dict[str, t.Any]],
    student_id: str,
    course_id: str,
) -> t.Optional[RadialView]:
    tree = ensure_student_data(data)
    student = tree.students.get(student_id)
    if student is None:
        return None
    return radial_view_from_buckets(buckets_for_course(student, course_id))

