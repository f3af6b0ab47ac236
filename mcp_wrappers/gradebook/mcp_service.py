"""
MCP wrapper for the gradebook service.

This module exposes the same tool signatures as gradebook_server/server.py but
makes HTTP calls to the distributed gradebook service instead of running the
engine in-process. Responses come back as the service's camelCase JSON.
"""
from __future__ import annotations

import os
import typing as t

import httpx
from fastmcp import FastMCP

from services.shared.models import (
    CourseAggregatesRequest,
    DetailRowsRequest,
    ProgressTableRequest,
    StudentData,
    WeeklyGridsRequest,
)


mcp = FastMCP("GradebookMCPWrapper")

# Service URL - configurable via environment variable
GRADEBOOK_SERVICE_URL = os.getenv("GRADEBOOK_SERVICE_URL", "http://localhost:8004")

# Timeout settings for fast operations (in seconds)
STANDARD_TIMEOUT = 30.0


def _post(path: str, request) -> t.Any:
    """POST a request model to the gradebook service and return the decoded JSON body."""
    try:
        with httpx.Client(timeout=STANDARD_TIMEOUT) as client:
            response = client.post(
                f"{GRADEBOOK_SERVICE_URL}{path}",
                json=request.model_dump(by_alias=True, exclude_none=True),
            )
            response.raise_for_status()
        return response.json()

    except httpx.TimeoutException as e:
        raise RuntimeError(f"Gradebook request {path} timed out after {STANDARD_TIMEOUT} seconds") from e
    except httpx.HTTPStatusError as e:
        raise RuntimeError(
            f"HTTP error from gradebook service: {e.response.status_code} {e.response.text}"
        ) from e
    except httpx.HTTPError as e:
        raise RuntimeError(f"Error calling gradebook service: {str(e)}") from e


def _get_weekly_grids(
    student_data: dict[str, t.Any],
    as_of: str,
    timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """
    Build weekly grids for every student via the gradebook service.
    """
    request = WeeklyGridsRequest(
        student_data=StudentData.model_validate(student_data),
        as_of=as_of,
        timezone=timezone,
    )
    return _post("/grids/weekly", request)


def _get_detail_rows(
    student_data: dict[str, t.Any],
    student_id: str,
    now_iso: t.Optional[str] = None,
    timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """
    List one student's detail rows via the gradebook service.
    """
    request = DetailRowsRequest(
        student_data=StudentData.model_validate(student_data),
        student_id=student_id,
        now_iso=now_iso,
        timezone=timezone,
    )
    return _post("/detail/rows", request)


def _select_progress_table_rows(
    student_data: dict[str, t.Any],
    student_id: str,
    as_of: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """
    Build one student's progress table via the gradebook service.
    """
    request = ProgressTableRequest(
        student_data=StudentData.model_validate(student_data),
        student_id=student_id,
        as_of=as_of,
    )
    return _post("/progress/table", request)


def _get_course_aggregates(student_data: dict[str, t.Any], student_id: str) -> dict[str, t.Any]:
    request = CourseAggregatesRequest(
        student_data=StudentData.model_validate(student_data),
        student_id=student_id,
    )
    return _post("/progress/aggregates", request)


# MCP tool wrappers that call the raw functions
@mcp.tool(name="get_weekly_grids")
def get_weekly_grids(
    student_data: dict[str, t.Any],
    as_of: str,
    timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """Builds the weekly attention grid for every student in the tree."""
    return _get_weekly_grids(student_data, as_of, timezone)


@mcp.tool(name="get_detail_rows")
def get_detail_rows(
    student_data: dict[str, t.Any],
    student_id: str,
    now_iso: t.Optional[str] = None,
    timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """Lists one flat row per assignment for a student."""
    return _get_detail_rows(student_data, student_id, now_iso, timezone)


@mcp.tool(name="select_progress_table_rows")
def select_progress_table_rows(
    student_data: dict[str, t.Any],
    student_id: str,
    as_of: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """Groups a student's turned-in and past-due work by course and status."""
    return _select_progress_table_rows(student_data, student_id, as_of)


@mcp.tool(name="get_course_aggregates")
def get_course_aggregates(student_data: dict[str, t.Any], student_id: str) -> dict[str, t.Any]:
    """Per-course point totals, the overall rollup and radial views for a student."""
    return _get_course_aggregates(student_data, student_id)
