"""Canvas and dashboard URL builders."""
from __future__ import annotations

import typing as t
from urllib.parse import urlencode

from . import config


def is_http_url(value: t.Optional[str]) -> bool:
    return bool(value) and (value.startswith("http://") or value.startswith("https://"))


def build_canvas_course_url(course_id: t.Union[str, int], base_url: t.Optional[str] = None) -> str:
    base = (base_url or config.CANVAS_BASE_URL).rstrip("/")
    return f"{base}/courses/{course_id}"


def build_canvas_assignment_url(
    course_id: t.Union[str, int],
    assignment_id: t.Union[str, int],
    base_url: t.Optional[str] = None,
) -> str:
    return f"{build_canvas_course_url(course_id, base_url)}/assignments/{assignment_id}"


def no_date_deep_link(student_id: str, course_id: str, base_url: t.Optional[str] = None) -> str:
    """Link to the detail view filtered to one course's undated assignments."""
    base = (base_url or config.DASHBOARD_BASE_URL).rstrip("/")
    query = urlencode({"student": student_id, "course": course_id, "nodate": 1})
    return f"{base}/detail?{query}"


def progress_table_url(
    student_id: str,
    course_id: t.Optional[str] = None,
    open_groups: t.Optional[list[str]] = None,
    q: t.Optional[str] = None,
    base_url: t.Optional[str] = None,
) -> str:
    """Deep link into the progress table, optionally focused on a course and expanded groups."""
    base = (base_url or config.DASHBOARD_BASE_URL).rstrip("/")
    params: dict[str, str] = {"student": student_id}
    if course_id:
        params["course"] = course_id
    if open_groups:
        params["open"] = ",".join(open_groups)
    if q:
        params["q"] = q
    return f"{base}/progress?{urlencode(params)}"
