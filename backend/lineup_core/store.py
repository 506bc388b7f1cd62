from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from .entrant import ResolvedLineup


def merge(
    existing: Mapping[str, ResolvedLineup], incoming: Iterable[ResolvedLineup]
) -> Dict[str, ResolvedLineup]:
    """Return a new class_id -> lineup mapping.

    Each incoming lineup replaces the stored one for its class outright;
    classes not in ``incoming`` are carried over unchanged.
    """

    merged = dict(existing)
    for lineup in incoming:
        merged[lineup.class_id] = lineup
    return merged


class LineupStore:
    """Holds the latest resolved lineup for every class."""

    def __init__(self, lineups: Optional[Iterable[ResolvedLineup]] = None) -> None:
        self._lineups: Dict[str, ResolvedLineup] = merge({}, lineups or [])

    def apply(self, incoming: Iterable[ResolvedLineup]) -> None:
        self._lineups = merge(self._lineups, incoming)

    def get(self, class_id: str) -> Optional[ResolvedLineup]:
        return self._lineups.get(class_id)

    def lineups(self) -> List[ResolvedLineup]:
        return list(self._lineups.values())

    def remove_class(self, class_id: str) -> bool:
        if class_id not in self._lineups:
            return False
        self._lineups = {key: value for key, value in self._lineups.items() if key != class_id}
        return True

    def clear(self) -> None:
        self._lineups = {}

    def __len__(self) -> int:
        return len(self._lineups)

    def __contains__(self, class_id: object) -> bool:
        return class_id in self._lineups
