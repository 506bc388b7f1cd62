from __future__ import annotations

import csv
import datetime as dt
import html
import math
import re
from io import StringIO
from typing import Dict, List, Optional, Sequence, Tuple

from .entrant import Entrant, ResolvedLineup
from .settings import ExportSettings, TrackInfo

FOOTER_TEXT = "Lineups produced by StagingBoss"
GRID_HEADERS = ["Inside", "Outside"]
TABLE_HEADERS = ["Position", "Car #", "Driver", "Pill #"]


def format_draw_number(entrant: Entrant) -> str:
    return "-" if entrant.draw_number is None else str(entrant.draw_number)


def short_driver_name(driver_name: str) -> str:
    """Shorten "John Smith" to "J. Smith". Single names are returned unchanged."""

    parts = driver_name.split()
    if len(parts) <= 1:
        return driver_name
    return f"{parts[0][0]}. {' '.join(parts[1:])}"


def format_lineup_rows(lineup: ResolvedLineup) -> List[Dict[str, object]]:
    return [
        {
            "Position": position,
            "Car #": entrant.car_number,
            "Driver": entrant.driver_name,
            "Pill #": format_draw_number(entrant),
        }
        for position, entrant in lineup.positions()
    ]


def format_inside_outside(lineup: ResolvedLineup) -> List[Tuple[str, str]]:
    """Split a lineup into two columns for double-file staging.

    The first half of the grid (rounded up) lines up inside, the rest
    outside, row by row.
    """

    entrants = lineup.entrants
    rows = math.ceil(len(entrants) / 2)

    def cell(index: int) -> str:
        if index >= len(entrants):
            return ""
        entrant = entrants[index]
        return f"{entrant.car_number} ({short_driver_name(entrant.driver_name)})"

    return [(cell(i), cell(i + rows)) for i in range(rows)]


def generate_default_filename(track_name: str, today: Optional[dt.date] = None) -> str:
    today = today or dt.date.today()
    track_slug = re.sub(r"[^a-z0-9]", "_", track_name.lower())
    return f"{track_slug}_lineups_{today.isoformat()}"


def to_csv(lineups: Sequence[ResolvedLineup], settings: ExportSettings, track_info: TrackInfo) -> str:
    buf = StringIO()
    w = csv.writer(buf)
    w.writerow([track_info.name])
    for lineup in lineups:
        w.writerow([])
        w.writerow([lineup.class_name])
        if settings.include_headers:
            w.writerow(TABLE_HEADERS)
        for row in format_lineup_rows(lineup):
            w.writerow([row[header] for header in TABLE_HEADERS])
    w.writerow([])
    w.writerow([FOOTER_TEXT])
    return buf.getvalue()


def to_html(
    lineups: Sequence[ResolvedLineup],
    settings: ExportSettings,
    track_info: TrackInfo,
    race_date: Optional[dt.date] = None,
) -> str:
    def table_header(headers: List[str]) -> str:
        return "<tr>" + "".join(f"<th>{header}</th>" for header in headers) + "</tr>"

    def td(value) -> str:
        return f"<td>{html.escape(str(value))}</td>"

    race_date = race_date or dt.date.today()
    body = [
        f"<h1>{html.escape(track_info.name)}</h1>",
        f"<p class='race-date'>Race Date: {race_date.isoformat()}</p>",
    ]
    if settings.include_track_logo and track_info.logo_url:
        body.append(f"<img class='logo' src='{html.escape(track_info.logo_url, quote=True)}'>")

    for lineup in lineups:
        body.append(f"<h2>{html.escape(lineup.class_name)}</h2>")
        table = ["<table class='grid'>"]
        if settings.include_headers:
            table.append(table_header(GRID_HEADERS))
        for inside, outside in format_inside_outside(lineup):
            table.append("<tr>" + td(inside) + td(outside) + "</tr>")
        table.append("</table>")
        body.append("".join(table))

    body.append(f"<p class='footer'>{FOOTER_TEXT}</p>")

    striping = "table.grid tr:nth-child(even) td{background-color: #f0f0f0;}" if settings.alternate_row_colors else ""
    style = """<style>
            th{
                font-size: 12px;
                border: 1px solid black;
                text-align: center;
                padding: 2px;
                background-color: #6495ed;
                color: #ffffff;
            }
            table {border-collapse: collapse; width: 100%;}
            td {
                text-align: center;
                font-size: 12px;
                border: 1px solid black;
                padding: 2px;
            }
            p.footer {font-size: 8px; color: #969696; text-align: center;}
            """ + striping + """
        </style>"""

    return "<html><head>" + style + "</head><body>" + "".join(body) + "</body></html>"
