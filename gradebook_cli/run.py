# -*- coding: utf-8 -*-
import json
import logging
import sys
import typing as t

import click
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gradebook_server import config
from gradebook_server.aggregates import calculate_overall_progress, calculate_student_course_aggregates
from gradebook_server.dates import utc_now_iso
from gradebook_server.detail_rows import DETAIL_HEADERS, get_selected_detail
from gradebook_server.formatters import format_number, format_points
from gradebook_server.links import progress_table_url
from gradebook_server.models import StudentData
from gradebook_server.progress import select_progress_table_rows
from gradebook_server.serialize import to_json_dict
from gradebook_server.weekly_grids import WEEKDAY_KEYS, get_weekly_grids, today_column_index


console = Console()
err_console = Console(stderr=True)

ATTENTION_ICONS = {
    "Warning": "⚠️",
    "Question": "❓",
    "Thumb": "👍",
    "Check": "✅",
}


def load_tree(path: str) -> StudentData:
    """Read a normalized student tree from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return StudentData.from_dict(json.load(f))


def fail(message: str) -> t.NoReturn:
    err_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def emit(data: t.Any, raw: bool, title: str) -> None:
    """Print a view as plain JSON (``--raw``) or as a rich JSON panel."""
    if raw:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        console.print(Panel(JSON(json.dumps(data, ensure_ascii=False)), title=title, expand=True))


def _cell(items: list[dict[str, t.Any]]) -> str:
    return "\n".join(f"{ATTENTION_ICONS[item['attentionType']]} {item['title']}" for item in items)


def create_grid_table(grid: dict[str, t.Any], highlight: int) -> Table:
    """Render one student's weekly grid, highlighting the as-of day's column."""
    header = grid["header"]
    table = Table(title=header["studentHeader"], show_header=True, header_style="bold magenta", show_lines=True)
    for index, column in enumerate(header["columns"]):
        style = "bold yellow" if index == highlight else None
        table.add_column(column, header_style=style or "bold magenta")

    for row in grid["rows"]:
        cells = row["cells"]
        table.add_row(
            row["courseName"],
            _cell(cells["prior"]),
            *(_cell(cells["weekday"][key]) for key in WEEKDAY_KEYS),
            _cell(cells["next"]),
            cells["noDate"]["label"] if cells["noDate"]["count"] else "",
        )
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose (debug) logging.")
def main(verbose: bool) -> None:
    """Weekly grids, detail rows and progress tables from a gradebook JSON tree."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("tree_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--as-of", help="Reference instant (ISO-8601). Defaults to now.")
@click.option("--timezone", default=config.DEFAULT_TIMEZONE, show_default=True, help="IANA timezone.")
@click.option("--student", help="Only show this student id.")
@click.option("--raw", is_flag=True, help="Print plain JSON instead of tables.")
def grids(tree_json: str, as_of: t.Optional[str], timezone: str, student: t.Optional[str], raw: bool) -> None:
    """Build the weekly attention grid for each student."""
    as_of = as_of or utc_now_iso()
    try:
        result = get_weekly_grids(load_tree(tree_json), as_of, timezone)
    except ValueError as e:
        fail(str(e))

    if student:
        if student not in result:
            fail(f"Student {student} not found")
        result = {student: result[student]}

    data = to_json_dict(result)
    if raw:
        emit(data, raw, "Weekly grids")
        return

    for student_id, view in result.items():
        highlight = today_column_index(view.grid.header, as_of)
        console.print(create_grid_table(data[student_id]["grid"], highlight))

        summary = Text()
        for attention, icon in ATTENTION_ICONS.items():
            summary.append(f"{icon} {attention}: ", style="white")
            summary.append(f"{view.summary.attention_counts[attention]}  ", style="bold green")
        summary.append(f"\nTotal items: {view.summary.total_items}", style="white")
        console.print(Panel(summary, title=f"📊 {student_id}", border_style="green"))


@main.command()
@click.argument("tree_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--student", required=True, help="Student id.")
@click.option("--now", "now_iso", help="Reference instant for short date display (ISO-8601).")
@click.option("--timezone", default=config.DEFAULT_TIMEZONE, show_default=True, help="IANA timezone.")
@click.option("--raw", is_flag=True, help="Print plain JSON instead of a table.")
def detail(tree_json: str, student: str, now_iso: t.Optional[str], timezone: str, raw: bool) -> None:
    """List one row per assignment for a student."""
    try:
        selected = get_selected_detail(load_tree(tree_json), student, now_iso or utc_now_iso(), timezone)
    except ValueError as e:
        fail(str(e))

    if raw:
        emit(to_json_dict(selected), raw, "Detail rows")
        return

    table = Table(title=f"📚 {student}", show_header=True, header_style="bold magenta")
    for header in DETAIL_HEADERS:
        table.add_column(header)
    for row in selected.rows:
        table.add_row(
            row.student_preferred_name,
            row.course_short_name,
            row.teacher_name,
            row.assignment_name,
            row.checkpoint_status,
            format_number(row.points_possible) if row.points_possible is not None else "",
            format_number(row.points_graded),
            f"{row.grade_pct}%" if row.grade_pct is not None else "",
            row.due_at_display or "",
            row.submitted_at_display or "",
            row.graded_at_display or "",
        )
    console.print(table)


@main.command()
@click.argument("tree_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--student", required=True, help="Student id.")
@click.option("--as-of", help="Reference instant deciding which Missing work is past due.")
@click.option("--raw", is_flag=True, help="Print plain JSON instead of a table.")
def progress(tree_json: str, student: str, as_of: t.Optional[str], raw: bool) -> None:
    """Group a student's turned-in and past-due work by course and status."""
    try:
        table_data = select_progress_table_rows(load_tree(tree_json), student, as_of or utc_now_iso())
    except ValueError as e:
        fail(str(e))
    if table_data is None:
        fail(f"Student {student} not found")

    if raw:
        emit(to_json_dict(table_data), raw, "Progress")
        return

    table = Table(
        title=f"📈 {table_data.student_name}: {table_data.total_percentage}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Course / Status", style="cyan")
    table.add_column("Assignments", justify="right")
    table.add_column("Earned", justify="right")
    table.add_column("Possible", justify="right")
    table.add_column("%", justify="right", style="yellow")
    for course in table_data.courses:
        table.add_row(
            f"[bold]{course.course_name}[/bold] ({course.teacher_name or '—'})",
            str(course.assignment_count),
            format_points(course.total_earned),
            format_points(course.total_possible),
            course.percentage,
        )
        for group in course.status_groups:
            table.add_row(
                f"  {group.status}",
                str(group.assignment_count),
                format_points(group.total_earned),
                format_points(group.total_possible),
                group.percentage,
            )
    console.print(table)
    console.print(f"🔗 {progress_table_url(table_data.student_id)}", soft_wrap=True)


@main.command()
@click.argument("tree_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--student", required=True, help="Student id.")
@click.option("--raw", is_flag=True, help="Print plain JSON instead of a panel.")
def aggregates(tree_json: str, student: str, raw: bool) -> None:
    """Per-course point totals and turned-in percentages for a student."""
    try:
        courses = calculate_student_course_aggregates(load_tree(tree_json), student)
    except ValueError as e:
        fail(str(e))

    emit(
        {
            "courses": to_json_dict(courses),
            "overall": to_json_dict(calculate_overall_progress(courses)),
        },
        raw,
        f"Aggregates for {student}",
    )


if __name__ == "__main__":
    main()
