"""Exceptions raised by the gradebook engine."""


class GridItemValidationError(ValueError):
    """Raised when an assignment cannot be turned into a grid item (bad id or URL)."""

    def __init__(self, message: str, assignment_id: str = "") -> None:
        super().__init__(message)
        self.assignment_id = assignment_id
