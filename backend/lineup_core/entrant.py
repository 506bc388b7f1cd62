from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class RaceClass:
    """A competitor category such as "Street Stock".

    Identity is the id; names are labels and may repeat.
    """

    id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Entrant:
    """One car and driver on the race-day sheet.

    Entrants are rebuilt from raw text on every pass and never mutated;
    renumbering goes through ``with_draw_number``.
    """

    car_number: str
    driver_name: str
    draw_number: Optional[int]  # None = no pill drawn
    class_name: str
    class_id: str

    @property
    def has_draw(self) -> bool:
        return self.draw_number is not None

    def with_draw_number(self, draw_number: Optional[int]) -> "Entrant":
        return replace(self, draw_number=draw_number)


@dataclass(frozen=True)
class ResolvedLineup:
    class_id: str
    class_name: str
    entrants: Tuple[Entrant, ...] = field(default_factory=tuple)

    def positions(self) -> Iterator[Tuple[int, Entrant]]:
        """Yield (grid position, entrant) pairs, positions starting at 1."""

        return enumerate(self.entrants, start=1)

    def __len__(self) -> int:
        return len(self.entrants)
