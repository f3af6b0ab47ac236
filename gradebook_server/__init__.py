"""Temporal bucketing and attention classification for a student gradebook tree."""
from .detail_rows import get_detail_rows, get_selected_detail
from .errors import GridItemValidationError
from .grid_items import to_grid_items
from .models import StudentData
from .progress import select_progress_table_rows
from .weekly_grids import get_weekly_grids


__all__ = [
    "GridItemValidationError",
    "StudentData",
    "get_detail_rows",
    "get_selected_detail",
    "get_weekly_grids",
    "select_progress_table_rows",
    "to_grid_items",
]
