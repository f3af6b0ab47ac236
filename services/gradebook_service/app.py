"""
FastAPI service for gradebook views.

This service exposes the engine in gradebook_server as REST API endpoints. Every
call is a pure computation over the student tree sent in the request body, so the
service keeps no state between requests.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from gradebook_server import config
from gradebook_server.aggregates import (
    buckets_for_course,
    calculate_overall_progress,
    calculate_student_course_aggregates,
    radial_view_from_buckets,
)
from gradebook_server.dates import resolve_zone, utc_now_iso
from gradebook_server.detail_rows import get_selected_detail
from gradebook_server.errors import GridItemValidationError
from gradebook_server.models import StudentData as EngineStudentData
from gradebook_server.progress import select_progress_table_rows
from gradebook_server.serialize import to_json_dict
from gradebook_server.weekly_grids import get_weekly_grids
from services.shared.models import (
    CourseAggregatesRequest,
    CourseAggregatesResponse,
    DetailRowsRequest,
    DetailRowsResponse,
    ProgressTableData,
    ProgressTableRequest,
    StudentWeeklyGrid,
    WeeklyGridsRequest,
)

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration on startup."""
    # Fail fast on a misconfigured default timezone rather than on the first request
    resolve_zone(config.DEFAULT_TIMEZONE)
    log.info("Gradebook service starting (timezone=%s, canvas=%s)",
             config.DEFAULT_TIMEZONE, config.CANVAS_BASE_URL)
    yield


app = FastAPI(
    title="Gradebook Service",
    description="REST API for weekly attention grids, detail rows and progress tables",
    version="1.0.0",
    lifespan=lifespan,
)


def _load_tree(request) -> EngineStudentData:
    try:
        return EngineStudentData.from_dict(request.student_data.to_tree())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid student tree: {e}")


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "gradebook-service"}


@app.post(
    "/grids/weekly",
    response_model=dict[str, StudentWeeklyGrid],
    response_model_exclude_none=True,
)
async def weekly_grids(request: WeeklyGridsRequest):
    """
    Build the weekly attention grid for every student in the tree.

    ``as_of`` defaults to the current instant and ``timezone`` to the configured one.
    """
    tree = _load_tree(request)
    as_of = request.as_of or utc_now_iso()
    try:
        grids = get_weekly_grids(tree, as_of, request.timezone or config.DEFAULT_TIMEZONE)
    except GridItemValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Error building weekly grids: {e}")
    return to_json_dict(grids)


@app.post("/detail/rows", response_model=DetailRowsResponse, response_model_exclude_none=True)
async def detail_rows(request: DetailRowsRequest):
    """
    List one flat row per assignment for the selected student.

    ``now_iso`` defaults to the current instant. An unknown student yields an empty row list.
    """
    tree = _load_tree(request)
    now_iso = request.now_iso or utc_now_iso()
    try:
        detail = get_selected_detail(
            tree, request.student_id, now_iso, request.timezone or config.DEFAULT_TIMEZONE
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Error building detail rows: {e}")
    return to_json_dict(detail)


@app.post("/progress/table", response_model=ProgressTableData, response_model_exclude_none=True)
async def progress_table(request: ProgressTableRequest):
    """
    Group a student's turned-in and past-due work by course, then by status.

    ``as_of`` defaults to the current instant, so Missing work only counts once it is past due.
    """
    tree = _load_tree(request)
    table = select_progress_table_rows(tree, request.student_id, request.as_of or utc_now_iso())
    if table is None:
        raise HTTPException(status_code=404, detail=f"Student {request.student_id} not found")
    return to_json_dict(table)


@app.post(
    "/progress/aggregates",
    response_model=CourseAggregatesResponse,
    response_model_exclude_none=True,
)
async def progress_aggregates(request: CourseAggregatesRequest):
    """
    Per-course point totals, the overall rollup and a radial view per course.
    """
    tree = _load_tree(request)
    student = tree.students.get(request.student_id)
    if student is None:
        raise HTTPException(status_code=404, detail=f"Student {request.student_id} not found")

    aggregates = calculate_student_course_aggregates(tree, request.student_id)
    radials = {
        aggregate.course_id: radial_view_from_buckets(buckets_for_course(student, aggregate.course_id))
        for aggregate in aggregates
    }
    return {
        "courses": to_json_dict(aggregates),
        "overall": to_json_dict(calculate_overall_progress(aggregates)),
        "radials": to_json_dict(radials),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.GRADEBOOK_SERVICE_PORT)
