"""Tests for the gradebook command-line tool."""
import json

from click.testing import CliRunner

from conftest import AS_OF, TREE_PATH, TZ
from gradebook_cli.run import main
from gradebook_server import config


def _run(*args: str):
    return CliRunner().invoke(main, [*args])


def test_grids_raw() -> None:
    result = _run("grids", str(TREE_PATH), "--as-of", AS_OF, "--timezone", TZ, "--raw")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["s1"]["summary"]["totalItems"] == 7
    assert data["s1"]["grid"]["header"]["studentHeader"] == "Ava — ⚠️:1 / ❓:1 / 👍:3 / ✅:2"


def test_grids_single_student() -> None:
    result = _run("grids", str(TREE_PATH), "--as-of", AS_OF, "--timezone", TZ, "--student", "s2", "--raw")
    assert result.exit_code == 0, result.output
    assert list(json.loads(result.output)) == ["s2"]


def test_grids_table_output() -> None:
    result = _run("grids", str(TREE_PATH), "--as-of", AS_OF, "--timezone", TZ)
    assert result.exit_code == 0, result.output
    assert "Total items: 7" in result.output


def test_grids_unknown_student_fails() -> None:
    result = _run("grids", str(TREE_PATH), "--as-of", AS_OF, "--student", "nobody")
    assert result.exit_code == 1


def test_grids_bad_timezone_fails() -> None:
    result = _run("grids", str(TREE_PATH), "--as-of", AS_OF, "--timezone", "Nope/Zone")
    assert result.exit_code == 1


def test_detail_raw() -> None:
    result = _run("detail", str(TREE_PATH), "--student", "s1", "--now", AS_OF, "--timezone", TZ, "--raw")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert len(data["rows"]) == 10
    assert data["headers"][0] == "Student"


def test_progress_raw() -> None:
    result = _run("progress", str(TREE_PATH), "--student", "s1", "--as-of", AS_OF, "--raw")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["totalPercentage"] == "33%"


def test_progress_unknown_student_fails() -> None:
    result = _run("progress", str(TREE_PATH), "--student", "nobody", "--as-of", AS_OF)
    assert result.exit_code == 1


def test_aggregates_raw() -> None:
    result = _run("aggregates", str(TREE_PATH), "--student", "s1", "--raw")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["overall"]["turnedInPercentage"] == 31


def test_invalid_json_fails(tmp_path) -> None:
    path = tmp_path / "tree.json"
    path.write_text("{not json", encoding="utf-8")
    result = _run("detail", str(path), "--student", "s1")
    assert result.exit_code == 1


def test_verbose_flag() -> None:
    result = CliRunner().invoke(main, ["--verbose", "progress", str(TREE_PATH), "--student", "s1", "--raw"])
    assert result.exit_code == 0, result.output


def test_progress_table_links_to_dashboard(monkeypatch) -> None:
    monkeypatch.setattr(config, "DASHBOARD_BASE_URL", "https://dash.test")
    result = _run("progress", str(TREE_PATH), "--student", "s1", "--as-of", AS_OF)
    assert result.exit_code == 0, result.output
    assert "https://dash.test/progress?student=s1" in result.output
