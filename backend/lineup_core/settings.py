from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

EXPORT_FORMATS = ("pdf", "excel", "csv", "html")


def _known_fields(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in raw.items() if key in names}


@dataclass
class TrackInfo:
    name: str = "Default Track"
    logo_url: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "TrackInfo":
        if not isinstance(raw, dict):
            return cls()
        info = cls(**_known_fields(cls, raw))
        if not str(info.name or "").strip():
            info.name = cls.name
        return info

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExportSettings:
    include_track_logo: bool = True
    alternate_row_colors: bool = True
    include_headers: bool = True
    file_name: str = "race_lineups"
    export_format: str = "pdf"

    @classmethod
    def from_dict(cls, raw: Any) -> "ExportSettings":
        if not isinstance(raw, dict):
            return cls()
        settings = cls(**_known_fields(cls, raw))
        if settings.export_format not in EXPORT_FORMATS:
            settings.export_format = cls.export_format
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AppSettings:
    dark_mode: bool = False
    track_info: TrackInfo = field(default_factory=TrackInfo)
    default_export_settings: ExportSettings = field(default_factory=ExportSettings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dark_mode": self.dark_mode,
            "track_info": self.track_info.to_dict(),
            "default_export_settings": self.default_export_settings.to_dict(),
        }
