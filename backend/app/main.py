from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import Response

from lineup_core import (
    ClassRegistryError,
    LineupInputError,
    LineupSession,
    RaceClass,
    ResolvedLineup,
)

app = FastAPI(title="StagingBoss Lineup API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger(__name__)


class RaceClassModel(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


class RaceClassCreate(BaseModel):
    id: Optional[str] = Field(default=None, description="Class id (generated if not provided)")
    name: str
    description: Optional[str] = None


class RaceClassUpdate(BaseModel):
    name: str
    description: Optional[str] = None


class ClassListResponse(BaseModel):
    classes: List[RaceClassModel]


class EntrantModel(BaseModel):
    position: int
    car_number: str = Field(alias="carNumber")
    driver_name: str = Field(alias="driverName")
    draw_number: Optional[int] = Field(default=None, alias="drawNumber")

    model_config = ConfigDict(populate_by_name=True)


class LineupModel(BaseModel):
    class_id: str = Field(alias="classId")
    class_name: str = Field(alias="className")
    entrants: List[EntrantModel]

    model_config = ConfigDict(populate_by_name=True)


class LineupListResponse(BaseModel):
    lineups: List[LineupModel]


class ProcessRequest(BaseModel):
    raw_text: str = Field(alias="rawText")
    class_id: Optional[str] = Field(default=None, alias="classId")

    model_config = ConfigDict(populate_by_name=True)


class ProcessResponse(BaseModel):
    lineup: Optional[LineupModel] = None
    messages: List[str]
    lineups: List[LineupModel]


class TrackInfoModel(BaseModel):
    name: str = "Default Track"
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")
    location: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ExportSettingsModel(BaseModel):
    include_track_logo: bool = Field(default=True, alias="includeTrackLogo")
    alternate_row_colors: bool = Field(default=True, alias="alternateRowColors")
    include_headers: bool = Field(default=True, alias="includeHeaders")
    file_name: str = Field(default="race_lineups", alias="fileName")
    export_format: str = Field(default="pdf", alias="exportFormat")

    model_config = ConfigDict(populate_by_name=True)


class SettingsResponse(BaseModel):
    dark_mode: bool = Field(alias="darkMode")
    track_info: TrackInfoModel = Field(alias="trackInfo")
    default_export_settings: ExportSettingsModel = Field(alias="defaultExportSettings")

    model_config = ConfigDict(populate_by_name=True)


class TrackInfoUpdate(BaseModel):
    name: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")
    location: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ExportSettingsUpdate(BaseModel):
    include_track_logo: Optional[bool] = Field(default=None, alias="includeTrackLogo")
    alternate_row_colors: Optional[bool] = Field(default=None, alias="alternateRowColors")
    include_headers: Optional[bool] = Field(default=None, alias="includeHeaders")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    export_format: Optional[str] = Field(default=None, alias="exportFormat")

    model_config = ConfigDict(populate_by_name=True)


class SettingsUpdate(BaseModel):
    dark_mode: Optional[bool] = Field(default=None, alias="darkMode")
    track_info: Optional[TrackInfoUpdate] = Field(default=None, alias="trackInfo")
    default_export_settings: Optional[ExportSettingsUpdate] = Field(default=None, alias="defaultExportSettings")

    model_config = ConfigDict(populate_by_name=True)


class SampleDataResponse(BaseModel):
    raw_text: str = Field(alias="rawText")

    model_config = ConfigDict(populate_by_name=True)


@lru_cache(maxsize=1)
def session() -> LineupSession:
    return LineupSession()


def _class_model(race_class: RaceClass) -> RaceClassModel:
    return RaceClassModel(id=race_class.id, name=race_class.name, description=race_class.description)


def _lineup_model(lineup: ResolvedLineup) -> LineupModel:
    return LineupModel(
        classId=lineup.class_id,
        className=lineup.class_name,
        entrants=[
            EntrantModel(
                position=position,
                carNumber=entrant.car_number,
                driverName=entrant.driver_name,
                drawNumber=entrant.draw_number,
            )
            for position, entrant in lineup.positions()
        ],
    )


def _content_disposition(file_name: str) -> str:
    """Attachment header that survives non-ASCII or quoted file names."""
    fallback = re.sub(r"[^A-Za-z0-9._-]", "_", file_name) or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"


def _settings_response(current: LineupSession) -> SettingsResponse:
    settings = current.settings
    return SettingsResponse(
        darkMode=settings.dark_mode,
        trackInfo=TrackInfoModel(**settings.track_info.to_dict()),
        defaultExportSettings=ExportSettingsModel(**settings.default_export_settings.to_dict()),
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/classes", response_model=ClassListResponse)
def list_classes(current: LineupSession = Depends(session)):
    return ClassListResponse(classes=[_class_model(c) for c in current.classes()])


@app.post("/classes", response_model=RaceClassModel, status_code=201)
def create_class(payload: RaceClassCreate, current: LineupSession = Depends(session)):
    try:
        race_class = current.add_class(payload.name, description=payload.description, class_id=payload.id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _class_model(race_class)


@app.put("/classes/{class_id}", response_model=RaceClassModel)
def update_class(class_id: str, payload: RaceClassUpdate, current: LineupSession = Depends(session)):
    try:
        race_class = current.update_class(class_id, payload.name, description=payload.description)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _class_model(race_class)


@app.delete("/classes/{class_id}", response_model=RaceClassModel)
def delete_class(class_id: str, current: LineupSession = Depends(session)):
    try:
        race_class = current.remove_class(class_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _class_model(race_class)


@app.get("/lineups", response_model=LineupListResponse)
def list_lineups(current: LineupSession = Depends(session)):
    return LineupListResponse(lineups=[_lineup_model(lineup) for lineup in current.lineups()])


@app.post("/lineups/process", response_model=ProcessResponse)
def process_lineup(payload: ProcessRequest, current: LineupSession = Depends(session)):
    try:
        outcome = current.process(payload.raw_text, payload.class_id)
    except LineupInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ClassRegistryError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    if outcome.messages:
        logger.info("Lineup processed with %d message(s)", len(outcome.messages))
    return ProcessResponse(
        lineup=_lineup_model(outcome.lineup) if outcome.lineup is not None else None,
        messages=outcome.messages,
        lineups=[_lineup_model(lineup) for lineup in current.lineups()],
    )


@app.delete("/lineups", status_code=204)
def clear_lineups(current: LineupSession = Depends(session)) -> Response:
    current.clear_lineups()
    return Response(status_code=204)


@app.get("/sample-data", response_model=SampleDataResponse)
def sample_data(current: LineupSession = Depends(session)):
    return SampleDataResponse(rawText=current.sample_data())


@app.get("/settings", response_model=SettingsResponse)
def get_settings(current: LineupSession = Depends(session)):
    return _settings_response(current)


@app.patch("/settings", response_model=SettingsResponse)
def update_settings(payload: SettingsUpdate, current: LineupSession = Depends(session)):
    try:
        if payload.dark_mode is not None:
            current.set_dark_mode(payload.dark_mode)
        if payload.track_info is not None:
            current.update_track_info(payload.track_info.model_dump(exclude_unset=True, exclude_none=True))
        if payload.default_export_settings is not None:
            current.update_export_settings(payload.default_export_settings.model_dump(exclude_unset=True, exclude_none=True))
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _settings_response(current)


@app.get("/export/{fmt}")
def export_lineups(fmt: str, current: LineupSession = Depends(session)) -> Response:
    try:
        document = current.export(fmt)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": _content_disposition(document.file_name)},
    )
