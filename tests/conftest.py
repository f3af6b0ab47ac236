"""Shared fixtures: a two-student gradebook tree viewed on Wednesday 2025-10-08."""
import json
import typing as t
from pathlib import Path

import pytest

from gradebook_server.models import StudentData


FIXTURES = Path(__file__).parent / "fixtures"
TREE_PATH = FIXTURES / "two_students.json"

# Wednesday noon, Pacific daylight time
AS_OF = "2025-10-08T12:00:00-07:00"
TZ = "America/Los_Angeles"


@pytest.fixture
def tree_dict() -> dict[str, t.Any]:
    """The raw JSON form of the fixture tree (a fresh copy per test)."""
    return json.loads(TREE_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def tree(tree_dict: dict[str, t.Any]) -> StudentData:
    return StudentData.from_dict(tree_dict)
