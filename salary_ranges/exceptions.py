"""Exceptions raised by the benchmark engine.

Only configuration problems are raised. Sparse or malformed source data is
absorbed into the output as empty fields instead.
"""


class BenchmarkError(Exception):
    """Base class for benchmark engine errors."""


class MissingTableError(BenchmarkError, FileNotFoundError):
    """A required source table is absent or has no rows."""

    def __init__(self, table: str, detail: str = "") -> None:
        self.table = table
        self.detail = detail
        message = f"Required source table '{table}' is missing or empty"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]
