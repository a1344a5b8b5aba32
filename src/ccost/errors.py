from __future__ import annotations

NO_USAGE_DATA = "No usage data"


class CcostError(Exception):
    """Base class for failures that abort a refresh cycle."""


class ExecutionError(CcostError):
    """The ccusage command failed or wrote only to its error stream."""


class DataError(CcostError):
    """The payload parsed but held no period records."""

    def __init__(self, message: str = NO_USAGE_DATA):
        super().__init__(message)


class ParseError(CcostError):
    """The payload was not valid JSON or a record had an unusable shape."""


__all__ = ["CcostError", "DataError", "ExecutionError", "NO_USAGE_DATA", "ParseError"]
