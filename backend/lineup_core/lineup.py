from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .entrant import Entrant, RaceClass, ResolvedLineup
from .errors import ClassRegistryError, ErrorKind, GroupError

logger = logging.getLogger(__name__)

_DIGIT_RUN = re.compile(r"\d+")


@dataclass
class ResolutionResult:
    lineups: List[ResolvedLineup] = field(default_factory=list)
    errors: List[GroupError] = field(default_factory=list)


def car_number_key(car_number: str) -> Tuple[int, int, str]:
    """Sort key for car numbers.

    Car numbers are ordered by their first run of digits ("9a" sorts as 9),
    then by the raw string. Car numbers without digits follow all numbered
    ones. String comparison is by code point, never by locale.
    """

    match = _DIGIT_RUN.search(car_number)
    if match:
        return (0, int(match.group()), car_number)
    return (1, 0, car_number)


def _resolve_duplicate_draws(drawn: List[Tuple[int, Entrant]]) -> List[Entrant]:
    drawn.sort(key=lambda item: (item[1].draw_number, item[0]))

    assigned: Set[int] = set()
    resolved: List[Entrant] = []
    for _, entrant in drawn:
        requested = int(entrant.draw_number)
        slot = requested
        while slot in assigned:
            slot += 1
        assigned.add(slot)
        if slot != requested:
            logger.info(
                "Changed draw #%d to #%d for car #%s (%s)",
                requested,
                slot,
                entrant.car_number,
                entrant.driver_name,
            )
            entrant = entrant.with_draw_number(slot)
        resolved.append(entrant)
    return resolved


def order_entrants(entrants: Iterable[Entrant]) -> Tuple[Entrant, ...]:
    """Order one class's entrants into starting-grid order.

    Drawn entrants come first, by draw number with arrival order breaking
    ties; colliding draws move up to the next free number. Entrants without a
    draw follow, ordered by car number.
    """

    drawn: List[Tuple[int, Entrant]] = []
    undrawn: List[Entrant] = []
    for index, entrant in enumerate(entrants):
        if entrant.has_draw:
            drawn.append((index, entrant))
        else:
            undrawn.append(entrant)

    resolved = _resolve_duplicate_draws(drawn)
    undrawn.sort(key=lambda e: car_number_key(e.car_number))
    return tuple(resolved + undrawn)


def resolve_lineups(
    entrants: Sequence[Entrant],
    classes: Sequence[RaceClass],
    class_ids: Optional[Iterable[str]] = None,
) -> ResolutionResult:
    """Build one lineup per class represented in ``entrants``.

    ``class_ids`` lists classes that get a lineup even when no entrant
    belongs to them. Entrants of a class missing from ``classes`` produce a
    ``GroupError`` instead of a lineup.
    """

    if not classes:
        raise ClassRegistryError("No classes available; set up race classes and retry")

    known: Dict[str, RaceClass] = {race_class.id: race_class for race_class in classes}

    groups: Dict[str, List[Entrant]] = {}
    for class_id in class_ids or ():
        groups.setdefault(class_id, [])
    for entrant in entrants:
        groups.setdefault(entrant.class_id, []).append(entrant)

    result = ResolutionResult()
    for class_id, members in groups.items():
        race_class = known.get(class_id)
        if race_class is None:
            result.errors.append(
                GroupError(
                    kind=ErrorKind.UNKNOWN_CLASS,
                    class_id=class_id,
                    entrant_count=len(members),
                    message=(
                        f"Class '{class_id}' not found; "
                        f"{len(members)} entrant(s) were not placed in a lineup"
                    ),
                )
            )
            continue
        result.lineups.append(
            ResolvedLineup(
                class_id=class_id,
                class_name=race_class.name,
                entrants=order_entrants(members),
            )
        )
    return result
