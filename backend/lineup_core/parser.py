from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .entrant import Entrant, RaceClass
from .errors import (
    EmptyInputError,
    ErrorKind,
    NoClassSelectedError,
    ParseError,
    Severity,
)

logger = logging.getLogger(__name__)

FIELD_DELIMITER = "\t"
_SPACE_RUN = re.compile(r" {2,}")
_DRAW_PREFIX = re.compile(r"[+-]?\d+")


@dataclass
class ParseResult:
    entrants: List[Entrant] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)

    @property
    def warnings(self) -> List[ParseError]:
        return [error for error in self.errors if error.severity is Severity.WARNING]


def split_fields(line: str) -> List[str]:
    """Split a row on tabs, or on runs of 2+ spaces when it has no tab."""

    if FIELD_DELIMITER in line:
        return line.split(FIELD_DELIMITER)
    return _SPACE_RUN.split(line.strip())


def parse_draw_number(value: str) -> Optional[int]:
    """Return the leading integer of ``value`` or None when there is none.

    Anything after the integer prefix is ignored, so "5.7" and "5a" both
    draw 5 and "-2.5" draws -2.
    """

    match = _DRAW_PREFIX.match(value.strip())
    if match is None:
        return None
    return int(match.group())


def parse_row(
    line: str, line_number: int, race_class: RaceClass
) -> Tuple[Optional[Entrant], List[ParseError]]:
    """Turn one line into an entrant.

    Returns ``(None, [])`` for blank lines. A row that cannot produce an
    entrant returns ``None`` with at least one error-severity problem; a row
    with an unreadable draw number still yields an entrant plus a warning.
    """

    errors: List[ParseError] = []
    if not line.strip():
        return None, errors

    parts = [part.strip() for part in split_fields(line.rstrip("\r\n"))]
    if len(parts) < 2:
        errors.append(
            ParseError(
                kind=ErrorKind.MALFORMED_ROW,
                line_number=line_number,
                message=f"insufficient fields (expected at least 2, got {len(parts)})",
            )
        )
        return None, errors

    raw_draw = ""
    if len(parts) >= 4:
        car_number, last_name, first_name, raw_draw = parts[:4]
        driver_name = f"{first_name} {last_name}".strip()
    elif len(parts) == 3:
        car_number, driver_name, raw_draw = parts
    else:
        car_number, driver_name = parts

    missing = []
    if not car_number:
        missing.append("car number")
    if not driver_name:
        missing.append("driver name")
    if missing:
        errors.append(
            ParseError(
                kind=ErrorKind.MALFORMED_ROW,
                line_number=line_number,
                message=f"missing required field(s): {', '.join(missing)}",
            )
        )
        return None, errors

    draw_number = None
    if raw_draw:
        draw_number = parse_draw_number(raw_draw)
        if draw_number is None:
            errors.append(
                ParseError(
                    kind=ErrorKind.INVALID_DRAW_NUMBER,
                    line_number=line_number,
                    message=f'invalid draw number "{raw_draw}", using arrival order',
                    severity=Severity.WARNING,
                )
            )

    entrant = Entrant(
        car_number=car_number,
        driver_name=driver_name,
        draw_number=draw_number,
        class_name=race_class.name,
        class_id=race_class.id,
    )
    return entrant, errors


def parse_lineup_text(raw_text: str, race_class: Optional[RaceClass]) -> ParseResult:
    """Parse a whole batch of rows for one class.

    Raises ``EmptyInputError`` or ``NoClassSelectedError`` before reading any
    row; per-line problems are collected in the result instead.
    """

    if not raw_text or not raw_text.strip():
        raise EmptyInputError()
    if race_class is None:
        raise NoClassSelectedError()

    result = ParseResult()
    for line_number, line in enumerate(raw_text.splitlines(), start=1):
        if not line.strip():
            logger.debug("Skipping blank line %d", line_number)
            continue
        entrant, errors = parse_row(line, line_number, race_class)
        result.errors.extend(errors)
        if entrant is not None:
            result.entrants.append(entrant)
    return result


def generate_sample_data(classes: Sequence[RaceClass]) -> str:
    lines: List[str] = []
    for index in range(len(classes)):
        for i in range(1, 4):
            car_number = 10 + i * (index + 1)
            lines.append(f"{car_number}\tDriver {index + 1}-{i}\t{index * 10 + i}")
    return "\n".join(lines)
