from __future__ import annotations

import csv
import datetime as dt
from io import StringIO

from lineup_core import Entrant, ResolvedLineup
from lineup_core.export import (
    FOOTER_TEXT,
    format_inside_outside,
    format_lineup_rows,
    generate_default_filename,
    short_driver_name,
    to_csv,
    to_html,
)
from lineup_core.settings import ExportSettings, TrackInfo


def _lineup(*rows) -> ResolvedLineup:
    entrants = tuple(
        Entrant(car_number=car, driver_name=name, draw_number=draw, class_name="Street Stock", class_id="3")
        for car, name, draw in rows
    )
    return ResolvedLineup(class_id="3", class_name="Street Stock", entrants=entrants)


LINEUP = _lineup(
    ("7", "Ann Lee", 1),
    ("9", "Bo Van Dyke", 2),
    ("3", "Cher", 3),
    ("12", "Dee Dee Ramone", None),
    ("15", "Ed Ek", None),
)


def test_short_driver_name() -> None:
    assert short_driver_name("Ann Lee") == "A. Lee"
    assert short_driver_name("Bo Van Dyke") == "B. Van Dyke"
    assert short_driver_name("Cher") == "Cher"


def test_lineup_rows_keep_resolved_order() -> None:
    rows = format_lineup_rows(LINEUP)

    assert [row["Position"] for row in rows] == [1, 2, 3, 4, 5]
    assert [row["Car #"] for row in rows] == ["7", "9", "3", "12", "15"]
    assert rows[3]["Pill #"] == "-"
    assert rows[0]["Pill #"] == "1"


def test_inside_outside_split() -> None:
    grid = format_inside_outside(LINEUP)

    assert grid == [
        ("7 (A. Lee)", "12 (D. Dee Ramone)"),
        ("9 (B. Van Dyke)", "15 (E. Ek)"),
        ("3 (Cher)", ""),
    ]
    assert format_inside_outside(_lineup()) == []


def test_default_filename() -> None:
    assert generate_default_filename("Thunder Road Speedbowl!", dt.date(2025, 6, 7)) == (
        "thunder_road_speedbowl__lineups_2025-06-07"
    )


def test_csv_honours_header_setting() -> None:
    track = TrackInfo(name="Thunder Road")

    with_headers = list(csv.reader(StringIO(to_csv([LINEUP], ExportSettings(), track))))
    without_headers = list(csv.reader(StringIO(to_csv([LINEUP], ExportSettings(include_headers=False), track))))

    assert with_headers[0] == ["Thunder Road"]
    assert ["Position", "Car #", "Driver", "Pill #"] in with_headers
    assert ["Position", "Car #", "Driver", "Pill #"] not in without_headers
    assert ["4", "12", "Dee Dee Ramone", "-"] in with_headers
    assert with_headers[-1] == [FOOTER_TEXT]


def test_html_layout() -> None:
    track = TrackInfo(name="Thunder <Road>", logo_url="https://example.com/logo.png")

    page = to_html([LINEUP], ExportSettings(), track, race_date=dt.date(2025, 6, 7))

    assert "Thunder &lt;Road&gt;" in page
    assert "Race Date: 2025-06-07" in page
    assert "<th>Inside</th>" in page
    assert "nth-child(even)" in page
    assert "logo.png" in page
    assert FOOTER_TEXT in page


def test_html_without_headers_logo_or_striping() -> None:
    settings = ExportSettings(include_headers=False, alternate_row_colors=False, include_track_logo=False)
    track = TrackInfo(name="Track", logo_url="https://example.com/logo.png")

    page = to_html([LINEUP], settings, track)

    assert "<th>" not in page
    assert "nth-child" not in page
    assert "logo.png" not in page
