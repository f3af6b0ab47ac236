"""
Deterministic ordering for courses, status groups and assignments.

Expressed as sort keys so callers write ``sorted(items, key=...)``.
"""
from __future__ import annotations

import math
import typing as t

from .dates import try_parse_iso
from .models import AssignmentNode, CourseNode


STATUS_PRIORITY = (
    "Due",
    "Missing",
    "Submitted (Late)",
    "Submitted",
    "Graded",
    "Optional",
    "Closed",
    "Vector",
    "Locked",
)
_STATUS_RANK = {status: index for index, status in enumerate(STATUS_PRIORITY)}

UNKNOWN_RANK = 999
UNKNOWN_PERIOD = 999


def status_rank(status: t.Optional[str]) -> int:
    return _STATUS_RANK.get(status or "", UNKNOWN_RANK)


def name_key(name: t.Optional[str]) -> tuple[str, str]:
    """Case-insensitive ordering with the original spelling as a stable tie-break."""
    text = name or ""
    return (text.casefold(), text)


def assignment_sort_key(assignment: AssignmentNode) -> tuple[float, tuple[str, str]]:
    """Due instant ascending (undated last), then name."""
    due = try_parse_iso(assignment.due_at)
    timestamp = due.timestamp() if due is not None else math.inf
    return (timestamp, name_key(assignment.name))


def course_sort_key(course: CourseNode) -> tuple[int, tuple[str, str]]:
    """Period ascending (unknown period last), then display name."""
    period = course.meta.period_number
    return (period if period is not None else UNKNOWN_PERIOD, name_key(course.display_name))
