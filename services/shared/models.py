"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the dataclass models in
gradebook_server.models. Field names stay snake_case in Python and travel as
camelCase on the wire, matching the JSON the engine reads and writes.
"""
from __future__ import annotations

import typing as t

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


AttentionType = t.Literal["Check", "Thumb", "Question", "Warning"]
BucketLabel = t.Literal["Earned", "Submitted", "Missing", "Lost"]


class CamelModel(BaseModel):
    """Base model: camelCase aliases on the wire, snake_case names accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TreeNode(CamelModel):
    """Tree nodes keep unknown keys so upstream additions pass through untouched."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# -----------------------------
# Input tree
# -----------------------------

class AssignmentNode(TreeNode):
    """
    One assignment as seen by one student.

    ``canvas`` holds the raw Canvas payload (name, due_at, html_url, points_possible);
    ``meta`` holds the curated checkpoint fields (checkpointStatus, assignmentType,
    checkpointEarnedPoints, ...).
    """
    assignment_id: t.Optional[str] = None
    course_id: t.Optional[str] = None
    canvas: dict[str, t.Any] = Field(default_factory=dict)
    meta: dict[str, t.Any] = Field(default_factory=dict)
    points_possible: t.Optional[float] = None
    link: t.Optional[str] = None
    submissions: dict[str, dict[str, t.Any]] = Field(default_factory=dict)


class CourseNode(TreeNode):
    course_id: t.Optional[str] = None
    canvas: dict[str, t.Any] = Field(default_factory=dict)
    meta: dict[str, t.Any] = Field(default_factory=dict)
    assignments: dict[str, AssignmentNode] = Field(default_factory=dict)


class StudentNode(TreeNode):
    student_id: t.Optional[str] = None
    meta: dict[str, t.Any] = Field(default_factory=dict)
    courses: dict[str, CourseNode] = Field(default_factory=dict)


class StudentData(TreeNode):
    """Root of the normalized tree: ``students[studentId].courses[courseId]...``."""
    students: dict[str, StudentNode] = Field(default_factory=dict)

    def to_tree(self) -> dict[str, t.Any]:
        """The JSON form the engine consumes."""
        return self.model_dump(by_alias=True, exclude_none=True)


# -----------------------------
# Weekly grid
# -----------------------------

class GridItem(CamelModel):
    """One display item in a weekly grid cell."""
    id: str
    title: str
    url: str
    attention_type: AttentionType
    due_at: t.Optional[str] = None
    points: t.Optional[float] = None


class NoDateCell(CamelModel):
    count: int
    points: float
    label: str          # "3 no due date (25 points)"
    deep_link_url: str


class CourseCells(CamelModel):
    prior: list[GridItem] = Field(default_factory=list)
    weekday: dict[str, list[GridItem]] = Field(default_factory=dict)  # "Mon".."Fri"
    next: list[GridItem] = Field(default_factory=list)
    no_date: NoDateCell


class GridSummary(CamelModel):
    attention_counts: dict[str, int]
    total_items: int


class CourseRow(CamelModel):
    course_id: str
    course_name: str
    cells: CourseCells
    summary: GridSummary


class WeeklyGridHeader(CamelModel):
    student_header: str
    columns: list[str]
    monday: str
    timezone: str


class WeeklyGrid(CamelModel):
    header: WeeklyGridHeader
    rows: list[CourseRow] = Field(default_factory=list)


class StudentWeeklyGrid(CamelModel):
    summary: GridSummary
    grid: WeeklyGrid


# -----------------------------
# Detail rows
# -----------------------------

class DetailRow(CamelModel):
    student_id: str
    student_preferred_name: str
    course_id: str
    course_short_name: str
    course_period: str
    teacher_name: str
    assignment_id: str
    assignment_name: str
    assignment_url: str
    checkpoint_status: str
    points_graded: float
    points_possible: t.Optional[float] = None
    grade_pct: t.Optional[int] = None
    due_at_iso: t.Optional[str] = Field(default=None, alias="dueAtISO")
    submitted_at_iso: t.Optional[str] = Field(default=None, alias="submittedAtISO")
    graded_at_iso: t.Optional[str] = Field(default=None, alias="gradedAtISO")
    due_at_display: t.Optional[str] = None
    submitted_at_display: t.Optional[str] = None
    graded_at_display: t.Optional[str] = None


class DetailRowsResponse(CamelModel):
    rows: list[DetailRow] = Field(default_factory=list)
    selected_student_id: str = ""
    headers: list[str] = Field(default_factory=list)


# -----------------------------
# Progress table and aggregates
# -----------------------------

class StatusGroupProgress(CamelModel):
    status: str
    assignments: list[dict[str, t.Any]] = Field(default_factory=list)
    total_earned: float = 0
    total_possible: float = 0
    percentage: str = "0%"
    assignment_count: int = 0


class CourseProgress(CamelModel):
    course_id: str
    course_name: str
    course_short_name: str
    teacher_name: str
    period: int
    total_earned: float = 0
    total_possible: float = 0
    percentage: str = "0%"
    assignment_count: int = 0
    status_groups: list[StatusGroupProgress] = Field(default_factory=list)


class ProgressTableData(CamelModel):
    student_id: str
    student_name: str
    total_earned: float
    total_possible: float
    total_percentage: str
    total_assignments: int
    courses: list[CourseProgress] = Field(default_factory=list)


class CourseAggregate(CamelModel):
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
    status_counts: dict[str, int] = Field(default_factory=dict)


class OverallProgress(CamelModel):
    total_courses: int
    total_assignments: int
    total_points: float
    earned_points: float
    submitted_points: float
    missing_points: float
    lost_points: float
    turned_in_percentage: int


class RadialSegment(CamelModel):
    label: BucketLabel
    color: str
    points: float
    percentage: float


class RadialView(CamelModel):
    segments: list[RadialSegment] = Field(default_factory=list)
    center_percent: int


class CourseAggregatesResponse(CamelModel):
    courses: list[CourseAggregate] = Field(default_factory=list)
    overall: OverallProgress
    radials: dict[str, RadialView] = Field(default_factory=dict)  # keyed by course id


# Request Models for API endpoints
class WeeklyGridsRequest(CamelModel):
    """Request model for building weekly grids; ``as_of`` defaults to now."""
    student_data: StudentData
    as_of: t.Optional[str] = None
    timezone: t.Optional[str] = None


class DetailRowsRequest(CamelModel):
    """Request model for a student's detail rows."""
    student_data: StudentData
    student_id: str
    now_iso: t.Optional[str] = None
    timezone: t.Optional[str] = None


class ProgressTableRequest(CamelModel):
    """Request model for a student's progress table."""
    student_data: StudentData
    student_id: str
    as_of: t.Optional[str] = None


class CourseAggregatesRequest(CamelModel):
    """Request model for a student's course aggregates."""
    student_data: StudentData
    student_id: str
