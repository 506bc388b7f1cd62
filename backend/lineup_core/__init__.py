"""Race-day lineup resolution: parse entrant rows, order grids, keep lineups per class."""

from .classes import ClassRegistry
from .entrant import Entrant, RaceClass, ResolvedLineup
from .errors import (
    ClassRegistryError,
    EmptyInputError,
    ErrorKind,
    GroupError,
    LineupInputError,
    NoClassSelectedError,
    ParseError,
    Severity,
)
from .lineup import ResolutionResult, car_number_key, order_entrants, resolve_lineups
from .loader import DataStore
from .parser import ParseResult, parse_lineup_text, parse_row
from .session import LineupSession, ProcessOutcome
from .store import LineupStore, merge

__all__ = [
    "ClassRegistry",
    "ClassRegistryError",
    "DataStore",
    "EmptyInputError",
    "Entrant",
    "ErrorKind",
    "GroupError",
    "LineupInputError",
    "LineupSession",
    "LineupStore",
    "NoClassSelectedError",
    "ParseError",
    "ParseResult",
    "ProcessOutcome",
    "RaceClass",
    "ResolutionResult",
    "ResolvedLineup",
    "Severity",
    "car_number_key",
    "merge",
    "order_entrants",
    "parse_lineup_text",
    "parse_row",
    "resolve_lineups",
]
