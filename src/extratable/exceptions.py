"""Custom exceptions for extratable."""

from __future__ import annotations


class ExtraTableError(Exception):
    """Base exception for all extratable errors."""

    pass


class ParseError(ExtraTableError):
    """Raised when block source text cannot be parsed into a store.

    Rendered inline in place of the table. No mutation is attempted.
    """

    def __init__(self, reason: str, line: int | None = None) -> None:
        self.reason = reason
        self.line = line
        where = f" (line {line})" if line is not None else ""
        super().__init__(f"Cannot parse table{where}: {reason}")


class SerializeError(ExtraTableError):
    """Raised when a store is internally inconsistent and cannot be written."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Cannot serialize table: " + "; ".join(problems))


class HostError(ExtraTableError):
    """Base exception for host document errors."""

    pass


class HostReplaceError(HostError):
    """Raised when the host cannot locate or replace a block's text range."""

    def __init__(self, file_path: str, reason: str) -> None:
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Cannot update '{file_path}': {reason}")


class AddressingMiss(ExtraTableError):
    """Raised when a page, row, column or cell position does not exist.

    Expected after a structural edit leaves UI state stale. Callers treat it
    as a silent no-op.
    """

    def __init__(self, what: str) -> None:
        self.what = what
        super().__init__(f"No such {what}")
