"""
Projection of the canonical student tree into the simplified shapes the weekly grid consumes.
"""
from __future__ import annotations

import logging
import typing as t

from .dates import try_parse_iso
from .links import build_canvas_assignment_url, is_http_url
from .models import (
    AssignmentNode,
    CourseNode,
    GridAssignment,
    GridCheckpointStatus,
    GridCourse,
    GridStudent,
    StudentData,
    StudentNode,
)

log = logging.getLogger(__name__)


def ensure_student_data(data: t.Union[StudentData, dict[str, t.Any]]) -> StudentData:
    """Accept either a built tree or its JSON form."""
    if isinstance(data, StudentData):
        return data
    return StudentData.from_dict(data)


def resolve_assignment_url(assignment: AssignmentNode, canvas_base_url: t.Optional[str] = None) -> str:
    """Canvas ``html_url``, else an http(s) ``link``, else a URL built from the ids."""
    if assignment.html_url:
        return assignment.html_url
    if is_http_url(assignment.link):
        return assignment.link
    return build_canvas_assignment_url(assignment.course_id, assignment.assignment_id, canvas_base_url)


def adapt_assignment(
    assignment: AssignmentNode,
    canvas_base_url: t.Optional[str] = None,
) -> t.Optional[GridAssignment]:
    status = GridCheckpointStatus.parse(assignment.meta.checkpoint_status)
    if status is None:
        log.debug(
            "Assignment %s has status %r outside the grid set; not shown in the weekly grid",
            assignment.assignment_id, assignment.meta.checkpoint_status,
        )
        return None

    due_at = assignment.due_at
    if due_at and try_parse_iso(due_at) is None:
        log.warning("Assignment %s has an unparseable due date %r; treating it as undated",
                    assignment.assignment_id, due_at)
        due_at = None

    return GridAssignment(
        id=assignment.assignment_id,
        name=assignment.name,
        checkpoint_status=status,
        url=resolve_assignment_url(assignment, canvas_base_url),
        points=assignment.points,
        due_at=due_at or None,
    )


def adapt_course(course: CourseNode, canvas_base_url: t.Optional[str] = None) -> GridCourse:
    assignments = []
    for assignment in course.assignments.values():
        adapted = adapt_assignment(assignment, canvas_base_url)
        if adapted is not None:
            assignments.append(adapted)
    return GridCourse(id=course.course_id, name=course.display_name, assignments=assignments)


def adapt_student(student: StudentNode, canvas_base_url: t.Optional[str] = None) -> GridStudent:
    return GridStudent(
        id=student.student_id,
        name=student.display_name,
        courses=[adapt_course(course, canvas_base_url) for course in student.courses.values()],
    )


def adapt_student_data(data: StudentData, canvas_base_url: t.Optional[str] = None) -> list[GridStudent]:
    """Flatten the keyed tree into ordered lists of students, courses and assignments."""
    return [adapt_student(student, canvas_base_url) for student in data.students.values()]
