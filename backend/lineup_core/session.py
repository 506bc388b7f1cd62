from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from . import export
from .classes import ClassRegistry
from .entrant import RaceClass, ResolvedLineup
from .errors import ClassRegistryError, EmptyInputError, GroupError, NoClassSelectedError, ParseError
from .lineup import resolve_lineups
from .loader import DataStore
from .parser import generate_sample_data, parse_lineup_text
from .settings import AppSettings, ExportSettings, TrackInfo
from .store import LineupStore

logger = logging.getLogger(__name__)


@dataclass
class ProcessOutcome:
    """What one parse-and-resolve pass produced.

    ``lineup`` is None only when the target class could not be resolved.
    """

    lineup: Optional[ResolvedLineup]
    parse_errors: List[ParseError] = field(default_factory=list)
    group_errors: List[GroupError] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [str(error) for error in self.parse_errors] + [str(error) for error in self.group_errors]


@dataclass
class ExportDocument:
    file_name: str
    media_type: str
    content: str


class LineupSession:
    """Classes, settings and stored lineups for one race day.

    Loads persisted classes and settings at startup and saves them on every
    change. Lineups live in memory only.
    """

    def __init__(self, data_store: Optional[DataStore] = None) -> None:
        self.data_store = data_store or DataStore()
        self.registry = ClassRegistry(self.data_store.load_classes())
        self.settings: AppSettings = self.data_store.load_settings()
        self.store = LineupStore()

    # ------------------------------------------------------------------
    # Lineups

    def process(self, raw_text: str, class_id: Optional[str]) -> ProcessOutcome:
        """Parse ``raw_text`` for one class and store the resulting lineup.

        Only the target class's lineup is replaced; lineups of other classes
        are kept. Raises ``EmptyInputError``/``NoClassSelectedError`` when the
        pass cannot start and ``ClassRegistryError`` when no classes exist.
        """

        if not raw_text or not raw_text.strip():
            raise EmptyInputError()
        if not class_id:
            raise NoClassSelectedError()
        if not len(self.registry):
            raise ClassRegistryError("No classes available; set up race classes and retry")
        race_class = self.registry.find_class(class_id)
        if race_class is None:
            raise LookupError(f"Class '{class_id}' not found")

        parsed = parse_lineup_text(raw_text, race_class)
        resolution = resolve_lineups(parsed.entrants, self.registry.list_classes(), class_ids=[race_class.id])
        self.store.apply(resolution.lineups)

        lineup = self.store.get(race_class.id) if resolution.lineups else None
        if lineup is not None:
            logger.info(
                "Processed lineup for %s with %d entrants (%d problems)",
                race_class.name,
                len(lineup),
                len(parsed.errors),
            )
        return ProcessOutcome(lineup=lineup, parse_errors=parsed.errors, group_errors=resolution.errors)

    def lineups(self) -> List[ResolvedLineup]:
        return self.store.lineups()

    def clear_lineups(self) -> None:
        self.store.clear()

    def sample_data(self) -> str:
        return generate_sample_data(self.registry.list_classes())

    # ------------------------------------------------------------------
    # Classes

    def classes(self) -> List[RaceClass]:
        return self.registry.list_classes()

    def add_class(self, name: str, description: Optional[str] = None, class_id: Optional[str] = None) -> RaceClass:
        race_class = self.registry.add_class(name, description=description, class_id=class_id)
        self.data_store.save_classes(self.registry.list_classes())
        logger.info("Class added: %s", race_class.name)
        return race_class

    def update_class(self, class_id: str, name: str, description: Optional[str] = None) -> RaceClass:
        race_class = self.registry.update_class(RaceClass(id=class_id, name=name.strip(), description=description or None))
        self.data_store.save_classes(self.registry.list_classes())

        lineup = self.store.get(class_id)
        if lineup is not None and lineup.class_name != race_class.name:
            self.store.apply([replace(lineup, class_name=race_class.name)])
        return race_class

    def remove_class(self, class_id: str) -> RaceClass:
        race_class = self.registry.remove_class(class_id)
        self.data_store.save_classes(self.registry.list_classes())
        self.store.remove_class(class_id)
        logger.info("Class removed: %s", race_class.name)
        return race_class

    # ------------------------------------------------------------------
    # Settings

    def update_track_info(self, changes: Dict[str, Any]) -> TrackInfo:
        merged = {**self.settings.track_info.to_dict(), **changes}
        self.settings.track_info = TrackInfo.from_dict(merged)
        self.data_store.save_track_info(self.settings.track_info)
        return self.settings.track_info

    def update_export_settings(self, changes: Dict[str, Any]) -> ExportSettings:
        merged = {**self.settings.default_export_settings.to_dict(), **changes}
        self.settings.default_export_settings = ExportSettings.from_dict(merged)
        self.data_store.save_export_settings(self.settings.default_export_settings)
        return self.settings.default_export_settings

    def set_dark_mode(self, dark_mode: bool) -> bool:
        self.settings.dark_mode = bool(dark_mode)
        self.data_store.save_dark_mode(self.settings.dark_mode)
        return self.settings.dark_mode

    # ------------------------------------------------------------------
    # Export

    def export(self, fmt: str, export_settings: Optional[ExportSettings] = None) -> ExportDocument:
        """Render the stored lineups as ``csv`` or ``html``.

        Raises ``RuntimeError`` when there is nothing to export.
        """

        lineups = self.lineups()
        if not lineups:
            raise RuntimeError("There are no lineups to export")

        settings = export_settings or self.settings.default_export_settings
        track_info = self.settings.track_info
        base_name = settings.file_name or export.generate_default_filename(track_info.name)

        if fmt == "csv":
            return ExportDocument(f"{base_name}.csv", "text/csv; charset=utf-8", export.to_csv(lineups, settings, track_info))
        if fmt == "html":
            return ExportDocument(f"{base_name}.html", "text/html; charset=utf-8", export.to_html(lineups, settings, track_info))
        raise ValueError(f"Unsupported export format '{fmt}'")
