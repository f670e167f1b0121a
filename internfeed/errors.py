"""
Error taxonomy for the ingestion pipeline.

Each error maps to one recovery strategy:
- FetchError: the cycle ends with no data, the next trigger retries.
- RowParseError: the row is dropped (or its date defaulted), scanning continues.
- ReconcileError: surfaced to on-demand callers, logged by scheduled runs.
"""


class InternfeedError(Exception):
    """Base class for all internfeed errors."""
    pass


class FetchError(InternfeedError):
    """Raised when the upstream README cannot be fetched."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class RowParseError(InternfeedError):
    """Raised when a table row or one of its cells cannot be decoded."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line


class ReconcileError(InternfeedError):
    """Raised when the store fails during an existence check or insert."""
    pass
