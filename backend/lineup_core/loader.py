from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from .classes import DEFAULT_CLASSES
from .entrant import RaceClass
from .settings import AppSettings, ExportSettings, TrackInfo


logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "track_info": "stagingboss_track_info",
    "classes": "stagingboss_classes",
    "dark_mode": "stagingboss_dark_mode",
    "export_settings": "stagingboss_export_settings",
}


class DataStore:
    """Persists classes and settings as JSON files, one file per storage key.

    Every read falls back to the defaults when the file is missing or
    unreadable.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        """Initialize the DataStore.

        Args:
            data_dir: Directory holding the JSON files. Defaults to
                ``STAGINGBOSS_DATA_DIR`` or ``backend/data``.
        """
        env_dir = os.getenv("STAGINGBOSS_DATA_DIR", "")
        self.data_dir = Path(data_dir or env_dir or (Path(__file__).parent.parent / "data"))

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{STORAGE_KEYS[key]}.json"

    # ------------------------------------------------------------------
    # Classes

    def load_classes(self) -> List[RaceClass]:
        data = self._read_json_file(self.path_for("classes"), None)
        if not isinstance(data, list):
            return list(DEFAULT_CLASSES)

        classes: List[RaceClass] = []
        for row in data:
            if not isinstance(row, dict):
                continue
            class_id = str(row.get("id") or "").strip()
            name = str(row.get("name") or "").strip()
            if not class_id or not name:
                logger.warning("Ignoring persisted class without id or name: %s", row)
                continue
            classes.append(RaceClass(id=class_id, name=name, description=row.get("description") or None))
        return classes

    def save_classes(self, classes: List[RaceClass]) -> None:
        rows = []
        for race_class in classes:
            row: Dict[str, Any] = {"id": race_class.id, "name": race_class.name}
            if race_class.description:
                row["description"] = race_class.description
            rows.append(row)
        self._write_json_file(self.path_for("classes"), rows)

    # ------------------------------------------------------------------
    # Settings

    def load_settings(self) -> AppSettings:
        settings = AppSettings()
        settings.track_info = TrackInfo.from_dict(self._read_json_file(self.path_for("track_info"), None))
        settings.default_export_settings = ExportSettings.from_dict(
            self._read_json_file(self.path_for("export_settings"), None)
        )
        dark_mode = self._read_json_file(self.path_for("dark_mode"), False)
        settings.dark_mode = dark_mode is True
        return settings

    def save_track_info(self, track_info: TrackInfo) -> None:
        self._write_json_file(self.path_for("track_info"), track_info.to_dict())

    def save_export_settings(self, export_settings: ExportSettings) -> None:
        self._write_json_file(self.path_for("export_settings"), export_settings.to_dict())

    def save_dark_mode(self, dark_mode: bool) -> None:
        self._write_json_file(self.path_for("dark_mode"), bool(dark_mode))

    # ------------------------------------------------------------------
    # File helpers

    def _read_json_file(self, path: Path, default: Any) -> Any:
        try:
            if not path.exists():
                return default
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Falling back to default for %s due to read error: %s", path, exc)
            return default

    def _write_json_file(self, path: Path, data: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
        except OSError as exc:
            raise RuntimeError(f"Failed to write local data store {path}") from exc
