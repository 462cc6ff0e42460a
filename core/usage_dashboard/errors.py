"""Error types raised by the dashboard pipeline."""

from typing import Optional


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class QueryValidationError(DashboardError):
    """
    Malformed or contradictory query parameters.

    Carries field-level detail as a list of ``{"path": [...], "message": ...}``
    dicts, ready to be returned to the caller.
    """

    def __init__(self, details: list[dict], message: str = "Invalid query parameters"):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        parts = [
            f"{'.'.join(str(p) for p in d.get('path', [])) or '<query>'}: {d.get('message')}"
            for d in self.details
        ]
        return f"{self.message} ({'; '.join(parts)})" if parts else self.message


class UpstreamError(DashboardError):
    """The raw log data source failed or timed out."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class SchemaMismatchError(DashboardError):
    """An upstream row does not have the expected shape."""

    def __init__(self, message: str, row: Optional[dict] = None):
        super().__init__(message)
        self.row = row
