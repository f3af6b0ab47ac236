"""
Data models for the normalized gradebook tree and the views derived from it.

The input side mirrors the JSON tree produced by the upstream builder:
students[studentId].courses[courseId].assignments[assignmentId].submissions[submissionId],
where every node carries the raw Canvas payload under ``canvas`` and curated fields
under ``meta``. The output side holds the weekly grid, detail row and progress rollup
shapes. Everything here is immutable; the engine never mutates its input.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from enum import Enum


# Open status string used by the detail and progress views ("Submitted (Late)", "Locked", ...)
DisplayStatus = str


class GridCheckpointStatus(Enum):
    """Closed set of checkpoint statuses the weekly grid understands."""
    DUE = "Due"
    MISSING = "Missing"
    SUBMITTED = "Submitted"
    GRADED = "Graded"

    @classmethod
    def parse(cls, value: t.Any) -> t.Optional[GridCheckpointStatus]:
        """Return the matching member, or None for statuses outside the grid set."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class AttentionType(Enum):
    CHECK = "Check"
    THUMB = "Thumb"
    QUESTION = "Question"
    WARNING = "Warning"


class FormatType(Enum):
    PRIOR = "Prior"
    WEEKDAY = "Weekday"
    NEXT = "Next"


def first_present(*candidates: t.Any) -> t.Any:
    """Return the first candidate that is neither None nor an empty string.

    Candidates are given in precedence order, e.g.
    ``first_present(meta.preferred_name, meta.legal_name, student_id)``.
    """
    for candidate in candidates:
        if candidate is None:
            continue
        if isinstance(candidate, str) and not candidate.strip():
            continue
        return candidate
    return None


def _optional_number(value: t.Any) -> t.Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: t.Any) -> t.Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _mapping(value: t.Any, what: str) -> dict[str, t.Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Expected an object for {what}, got: {type(value).__name__}")
    return value


# -----------------------------
# Input tree
# -----------------------------

@dataclass(frozen=True)
class SubmissionNode:
    """One submission record; every field is optional and absence is meaningful."""
    submission_id: str
    score: t.Optional[float] = None
    graded_points: t.Optional[float] = None
    submitted_at: t.Optional[str] = None
    graded_at: t.Optional[str] = None
    status: t.Optional[str] = None
    canvas: dict[str, t.Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, submission_id: str, raw: dict[str, t.Any]) -> SubmissionNode:
        raw = _mapping(raw, f"submission {submission_id}")
        return cls(
            submission_id=str(raw.get("submissionId") or submission_id),
            score=_optional_number(raw.get("score")),
            graded_points=_optional_number(raw.get("gradedPoints")),
            submitted_at=_optional_str(raw.get("submittedAt")),
            graded_at=_optional_str(raw.get("gradedAt")),
            status=_optional_str(raw.get("status")),
            canvas=_mapping(raw.get("canvas"), f"submission {submission_id} canvas"),
        )


@dataclass(frozen=True)
class AssignmentMeta:
    """Curated per-student assignment fields computed upstream."""
    checkpoint_status: DisplayStatus = ""
    assignment_type: str = "Pointed"
    checkpoint_earned_points: float = 0
    checkpoint_submitted_points: float = 0
    checkpoint_missing_points: float = 0
    checkpoint_lost_points: float = 0
    title: t.Optional[str] = None
    due_date: t.Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict[str, t.Any]) -> AssignmentMeta:
        raw = _mapping(raw, "assignment meta")
        return cls(
            checkpoint_status=str(raw.get("checkpointStatus") or ""),
            assignment_type=str(raw.get("assignmentType") or "Pointed"),
            checkpoint_earned_points=_optional_number(raw.get("checkpointEarnedPoints")) or 0,
            checkpoint_submitted_points=_optional_number(raw.get("checkpointSubmittedPoints")) or 0,
            checkpoint_missing_points=_optional_number(raw.get("checkpointMissingPoints")) or 0,
            checkpoint_lost_points=_optional_number(raw.get("checkpointLostPoints")) or 0,
            title=_optional_str(raw.get("title")),
            due_date=_optional_str(raw.get("dueDate")),
        )


@dataclass(frozen=True)
class AssignmentNode:
    assignment_id: str
    course_id: str
    canvas: dict[str, t.Any] = field(default_factory=dict)
    meta: AssignmentMeta = field(default_factory=AssignmentMeta)
    points_possible: t.Optional[float] = None
    link: t.Optional[str] = None
    submissions: dict[str, SubmissionNode] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, assignment_id: str, raw: dict[str, t.Any], course_id: str = "") -> AssignmentNode:
        raw = _mapping(raw, f"assignment {assignment_id}")
        submissions = _mapping(raw.get("submissions"), f"assignment {assignment_id} submissions")
        return cls(
            assignment_id=str(raw.get("assignmentId") or assignment_id),
            course_id=str(raw.get("courseId") or course_id),
            canvas=_mapping(raw.get("canvas"), f"assignment {assignment_id} canvas"),
            meta=AssignmentMeta.from_dict(raw.get("meta")),
            points_possible=_optional_number(raw.get("pointsPossible")),
            link=_optional_str(raw.get("link")),
            submissions={
                str(key): SubmissionNode.from_dict(str(key), value)
                for key, value in submissions.items()
            },
        )

    @property
    def name(self) -> str:
        name = first_present(self.canvas.get("name"), self.meta.title)
        return str(name) if name is not None else "Untitled"

    @property
    def due_at(self) -> t.Optional[str]:
        return first_present(self.canvas.get("due_at"), self.meta.due_date)

    @property
    def html_url(self) -> t.Optional[str]:
        return first_present(self.canvas.get("html_url"))

    @property
    def points(self) -> t.Optional[float]:
        """Points possible, preferring the curated value over the raw Canvas one."""
        if self.points_possible is not None:
            return self.points_possible
        return _optional_number(self.canvas.get("points_possible"))


@dataclass(frozen=True)
class CourseMeta:
    short_name: t.Optional[str] = None
    legal_name: t.Optional[str] = None
    teacher: t.Optional[str] = None
    instructor: t.Optional[str] = None
    period: t.Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict[str, t.Any]) -> CourseMeta:
        raw = _mapping(raw, "course meta")
        return cls(
            short_name=_optional_str(raw.get("shortName")),
            legal_name=_optional_str(raw.get("legalName")),
            teacher=_optional_str(raw.get("teacher")),
            instructor=_optional_str(raw.get("instructor")),
            period=_optional_str(raw.get("period")),
        )

    @property
    def period_number(self) -> t.Optional[int]:
        """Numeric period, or None when missing or not a whole number."""
        if self.period is None:
            return None
        try:
            return int(float(self.period))
        except (ValueError, OverflowError):
            return None


@dataclass(frozen=True)
class CourseNode:
    course_id: str
    canvas: dict[str, t.Any] = field(default_factory=dict)
    meta: CourseMeta = field(default_factory=CourseMeta)
    assignments: dict[str, AssignmentNode] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, course_id: str, raw: dict[str, t.Any]) -> CourseNode:
        raw = _mapping(raw, f"course {course_id}")
        resolved_id = str(raw.get("courseId") or course_id)
        assignments = _mapping(raw.get("assignments"), f"course {course_id} assignments")
        return cls(
            course_id=resolved_id,
            canvas=_mapping(raw.get("canvas"), f"course {course_id} canvas"),
            meta=CourseMeta.from_dict(raw.get("meta")),
            assignments={
                str(key): AssignmentNode.from_dict(str(key), value, course_id=resolved_id)
                for key, value in assignments.items()
            },
        )

    @property
    def display_name(self) -> str:
        return str(first_present(self.meta.short_name, self.canvas.get("name"), self.course_id))

    @property
    def teacher_name(self) -> str:
        return first_present(self.meta.teacher, self.meta.instructor) or ""


@dataclass(frozen=True)
class StudentMeta:
    preferred_name: t.Optional[str] = None
    legal_name: t.Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict[str, t.Any]) -> StudentMeta:
        raw = _mapping(raw, "student meta")
        return cls(
            preferred_name=_optional_str(raw.get("preferredName")),
            legal_name=_optional_str(raw.get("legalName")),
        )


@dataclass(frozen=True)
class StudentNode:
    student_id: str
    meta: StudentMeta = field(default_factory=StudentMeta)
    courses: dict[str, CourseNode] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, student_id: str, raw: dict[str, t.Any]) -> StudentNode:
        raw = _mapping(raw, f"student {student_id}")
        courses = _mapping(raw.get("courses"), f"student {student_id} courses")
        return cls(
            student_id=str(raw.get("studentId") or student_id),
            meta=StudentMeta.from_dict(raw.get("meta")),
            courses={str(key): CourseNode.from_dict(str(key), value) for key, value in courses.items()},
        )

    @property
    def display_name(self) -> str:
        return first_present(self.meta.preferred_name, self.meta.legal_name, self.student_id)


@dataclass(frozen=True)
class StudentData:
    """Root of the normalized tree."""
    students: dict[str, StudentNode] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, t.Any]) -> StudentData:
        """Build the tree from its JSON form.

        Raises:
            ValueError: If a node that must be an object is something else.
        """
        raw = _mapping(raw, "student data")
        students = _mapping(raw.get("students"), "students")
        return cls(
            students={str(key): StudentNode.from_dict(str(key), value) for key, value in students.items()}
        )


# -----------------------------
# Item formatter input/output
# -----------------------------

@dataclass(frozen=True)
class RawAssignment:
    """The Canvas-shaped fields the item formatter reads."""
    id: str
    name: str
    due_at: t.Optional[str] = None
    points_possible: t.Optional[float] = None
    html_url: t.Optional[str] = None


@dataclass(frozen=True)
class GridItemEntry:
    assignment: RawAssignment
    checkpoint_status: GridCheckpointStatus

    @classmethod
    def from_dict(cls, raw: dict[str, t.Any]) -> GridItemEntry:
        assignment = _mapping(raw.get("assignment"), "grid item assignment")
        return cls(
            assignment=RawAssignment(
                id=str(assignment.get("id") or ""),
                name=str(assignment.get("name") or ""),
                due_at=_optional_str(assignment.get("due_at")),
                points_possible=_optional_number(assignment.get("points_possible")),
                html_url=_optional_str(assignment.get("html_url")),
            ),
            checkpoint_status=GridCheckpointStatus.parse(raw.get("checkpointStatus")),
        )


@dataclass(frozen=True)
class GridItem:
    """One display item in a weekly grid cell."""
    id: str
    title: str
    url: str
    attention_type: AttentionType
    due_at: t.Optional[str] = None
    points: t.Optional[float] = None


# -----------------------------
# Weekly grid
# -----------------------------

@dataclass(frozen=True)
class GridAssignment:
    """Simplified assignment shape the weekly grid builder partitions."""
    id: str
    name: str
    checkpoint_status: GridCheckpointStatus
    url: str
    points: t.Optional[float] = None
    due_at: t.Optional[str] = None


@dataclass(frozen=True)
class GridCourse:
    id: str
    name: str
    assignments: list[GridAssignment] = field(default_factory=list)


@dataclass(frozen=True)
class GridStudent:
    id: str
    name: str
    courses: list[GridCourse] = field(default_factory=list)


@dataclass
class NoDateCell:
    count: int
    points: float
    label: str
    deep_link_url: str


@dataclass
class CourseCells:
    prior: list[GridItem]
    weekday: dict[str, list[GridItem]]  # keyed "Mon".."Fri"
    next: list[GridItem]
    no_date: NoDateCell


@dataclass
class GridSummary:
    attention_counts: dict[str, int]  # keyed by AttentionType value
    total_items: int


@dataclass
class CourseRow:
    course_id: str
    course_name: str
    cells: CourseCells
    summary: GridSummary


@dataclass
class WeeklyGridHeader:
    student_header: str
    columns: list[str]
    monday: str
    timezone: str


@dataclass
class WeeklyGrid:
    header: WeeklyGridHeader
    rows: list[CourseRow]


@dataclass
class StudentWeeklyGrid:
    summary: GridSummary
    grid: WeeklyGrid


WeeklyGridsResult = dict[str, StudentWeeklyGrid]


# -----------------------------
# Detail rows
# -----------------------------

@dataclass
class DetailRow:
    student_id: str
    student_preferred_name: str
    course_id: str
    course_short_name: str
    course_period: str
    teacher_name: str
    assignment_id: str
    assignment_name: str
    assignment_url: str
    checkpoint_status: DisplayStatus
    points_graded: float
    points_possible: t.Optional[float] = None
    grade_pct: t.Optional[int] = None
    due_at_iso: t.Optional[str] = field(default=None, metadata={"json": "dueAtISO"})
    submitted_at_iso: t.Optional[str] = field(default=None, metadata={"json": "submittedAtISO"})
    graded_at_iso: t.Optional[str] = field(default=None, metadata={"json": "gradedAtISO"})
    due_at_display: t.Optional[str] = None
    submitted_at_display: t.Optional[str] = None
    graded_at_display: t.Optional[str] = None


@dataclass
class SelectedDetail:
    rows: list[DetailRow]
    selected_student_id: str
    headers: list[str]


# -----------------------------
# Progress rollup
# -----------------------------

@dataclass
class StatusGroupProgress:
    status: DisplayStatus
    assignments: list[AssignmentNode] = field(default_factory=list)
    total_earned: float = 0
    total_possible: float = 0
    percentage: str = "0%"
    assignment_count: int = 0


@dataclass
class CourseProgress:
    course_id: str
    course_name: str
    course_short_name: str
    teacher_name: str
    period: int
    total_earned: float = 0
    total_possible: float = 0
    percentage: str = "0%"
    assignment_count: int = 0
    status_groups: list[StatusGroupProgress] = field(default_factory=list)


@dataclass
class ProgressTableData:
    student_id: str
    student_name: str
    total_earned: float
    total_possible: float
    total_percentage: str
    total_assignments: int
    courses: list[CourseProgress] = field(default_factory=list)


# -----------------------------
# Course aggregates / radial view
# -----------------------------

@dataclass
class CourseAggregate:
    course_id: str
    course_name: str
    teacher: str
    period: int
    total_assignments: int
    total_points: float
    earned_points: float
    submitted_points: float
    missing_points: float
    lost_points: float
    turned_in_percentage: int
    status_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class OverallProgress:
    total_courses: int
    total_assignments: int
    total_points: float
    earned_points: float
    submitted_points: float
    missing_points: float
    lost_points: float
    turned_in_percentage: int


@dataclass
class RadialSegment:
    label: str
    color: str
    points: float
    percentage: float


@dataclass
class RadialView:
    segments: list[RadialSegment]
    center_percent: int
