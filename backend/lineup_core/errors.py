from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    MALFORMED_ROW = "malformed_row"
    INVALID_DRAW_NUMBER = "invalid_draw_number"
    UNKNOWN_CLASS = "unknown_class"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ParseError:
    """A problem with a single input line.

    Errors drop the row; warnings keep it.
    """

    kind: ErrorKind
    line_number: int
    message: str
    severity: Severity = Severity.ERROR

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.message}"


@dataclass(frozen=True)
class GroupError:
    """A class group that could not be resolved into a lineup."""

    kind: ErrorKind
    class_id: str
    entrant_count: int
    message: str

    def __str__(self) -> str:
        return self.message


class LineupInputError(ValueError):
    """Raised before parsing when the pass cannot start."""


class EmptyInputError(LineupInputError):
    def __init__(self, message: str = "No lineup data provided") -> None:
        super().__init__(message)


class NoClassSelectedError(LineupInputError):
    def __init__(self, message: str = "No class selected for the lineup") -> None:
        super().__init__(message)


class ClassRegistryError(RuntimeError):
    """The class registry is empty or unavailable; fix class setup and retry."""
