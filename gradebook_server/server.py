# -*- coding: utf-8 -*-
"""
MCP tools over the gradebook engine.

Each tool takes the normalized student tree as JSON and returns the camelCase view.
The undecorated ``_``-prefixed functions hold the logic so they can be reused (and
tested) without going through FastMCP.
"""
from __future__ import annotations

import logging
import typing as t

from fastmcp import FastMCP

from . import config
from .aggregates import calculate_overall_progress, calculate_student_course_aggregates
from .dates import utc_now_iso
from .detail_rows import get_selected_detail
from .progress import select_progress_table_rows
from .serialize import to_json_dict
from .weekly_grids import get_weekly_grids

log = logging.getLogger(__name__)

mcp = FastMCP("GradebookServer")


def _get_weekly_grids(
        student_data: dict[str, t.Any],
        as_of: str,
        timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    grids = get_weekly_grids(student_data, as_of, timezone or config.DEFAULT_TIMEZONE)
    return to_json_dict(grids)


def _get_detail_rows(
        student_data: dict[str, t.Any],
        student_id: str,
        now_iso: t.Optional[str] = None,
        timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    detail = get_selected_detail(
        student_data, student_id, now_iso or utc_now_iso(), timezone or config.DEFAULT_TIMEZONE
    )
    return to_json_dict(detail)


def _select_progress_table_rows(
        student_data: dict[str, t.Any],
        student_id: str,
        as_of: t.Optional[str] = None,
) -> t.Optional[dict[str, t.Any]]:
    table = select_progress_table_rows(student_data, student_id, as_of or utc_now_iso())
    if table is None:
        log.info("Progress table requested for unknown student %s", student_id)
        return None
    return to_json_dict(table)


def _get_course_aggregates(student_data: dict[str, t.Any], student_id: str) -> dict[str, t.Any]:
    aggregates = calculate_student_course_aggregates(student_data, student_id)
    return {
        "courses": to_json_dict(aggregates),
        "overall": to_json_dict(calculate_overall_progress(aggregates)),
    }


@mcp.tool(name="get_weekly_grids")
def get_weekly_grids_tool(
        student_data: dict[str, t.Any],
        as_of: str,
        timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """Builds the weekly attention grid for every student in the tree.

    :param student_data: Normalized tree ``{"students": {id: {...}}}``.
    :param as_of: Reference instant in ISO format; picks the week shown.
    :param timezone: IANA timezone for day boundaries (defaults to the configured one).
    :return: Mapping of student id to ``{summary, grid}``.
    """
    return _get_weekly_grids(student_data, as_of, timezone)


@mcp.tool(name="get_detail_rows")
def get_detail_rows_tool(
        student_data: dict[str, t.Any],
        student_id: str,
        now_iso: t.Optional[str] = None,
        timezone: t.Optional[str] = None,
) -> dict[str, t.Any]:
    """Lists one flat row per assignment for a student.

    :param student_data: Normalized tree ``{"students": {id: {...}}}``.
    :param student_id: The student to list.
    :param now_iso: Reference instant for short ("M/D") date display (defaults to now).
    :param timezone: IANA timezone for date display (defaults to the configured one).
    :return: ``{rows, selectedStudentId, headers}``.
    """
    return _get_detail_rows(student_data, student_id, now_iso, timezone)


@mcp.tool(name="select_progress_table_rows")
def select_progress_table_rows_tool(
        student_data: dict[str, t.Any],
        student_id: str,
        as_of: t.Optional[str] = None,
) -> t.Optional[dict[str, t.Any]]:
    """Groups a student's turned-in and past-due work by course and status.

    :param student_data: Normalized tree ``{"students": {id: {...}}}``.
    :param student_id: The student to roll up.
    :param as_of: Reference instant deciding whether Missing work is past due (defaults to now).
    :return: The progress table, or None for an unknown student.
    """
    return _select_progress_table_rows(student_data, student_id, as_of)


@mcp.tool(name="get_course_aggregates")
def get_course_aggregates_tool(student_data: dict[str, t.Any], student_id: str) -> dict[str, t.Any]:
    """Per-course point totals and turned-in percentages for a student.

    :param student_data: Normalized tree ``{"students": {id: {...}}}``.
    :param student_id: The student to summarize.
    :return: ``{courses, overall}``.
    """
    return _get_course_aggregates(student_data, student_id)


if __name__ == "__main__":
    mcp.run()
