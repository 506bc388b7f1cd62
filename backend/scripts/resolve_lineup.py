"""CLI helper for resolving a tab-separated lineup file into a starting grid."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from lineup_core import ClassRegistryError, DataStore, LineupInputError, LineupSession
from lineup_core.export import format_inside_outside, format_lineup_rows


def _format_table(lineup) -> str:
    lines = [lineup.class_name, "Pos  Car     Driver                Pill"]
    for row in format_lineup_rows(lineup):
        lines.append(
            f"{str(row['Position']).ljust(5)}{str(row['Car #']).ljust(8)}"
            f"{str(row['Driver']).ljust(22)}{row['Pill #']}"
        )
    return "\n".join(lines)


def _format_grid(lineup) -> str:
    lines = [lineup.class_name, f"{'Inside'.ljust(30)}Outside"]
    for inside, outside in format_inside_outside(lineup):
        lines.append(f"{inside.ljust(30)}{outside}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("file", type=Path, help="tab-separated lineup file ('-' for stdin)")
    parser.add_argument("--class", dest="race_class", default=None, help="class name or id (default: first class)")
    parser.add_argument("--data-dir", type=Path, default=None, help="directory holding persisted classes/settings")
    parser.add_argument("--grid", action="store_true", help="print inside/outside staging columns")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(levelname)s %(message)s")

    session = LineupSession(DataStore(data_dir=args.data_dir))
    classes = session.classes()
    if not classes:
        print("ERROR: No classes available; set up race classes and retry", file=sys.stderr)
        return 1

    if args.race_class:
        target = session.registry.find_class(args.race_class) or session.registry.find_by_name(args.race_class)
        if target is None:
            print(f"ERROR: class '{args.race_class}' not found", file=sys.stderr)
            return 1
    else:
        target = classes[0]

    try:
        raw_text = sys.stdin.read() if str(args.file) == "-" else args.file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        outcome = session.process(raw_text, target.id)
    except (LineupInputError, ClassRegistryError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if outcome.lineup is not None:
        print(_format_grid(outcome.lineup) if args.grid else _format_table(outcome.lineup))

    for message in outcome.messages:
        print(f"  - {message}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
