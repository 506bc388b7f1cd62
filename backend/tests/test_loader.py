from __future__ import annotations

import json

import pytest

from lineup_core import DataStore, RaceClass
from lineup_core.classes import DEFAULT_CLASSES
from lineup_core.settings import ExportSettings, TrackInfo


@pytest.fixture
def store(tmp_path) -> DataStore:
    return DataStore(data_dir=tmp_path)


def test_defaults_when_nothing_is_persisted(store: DataStore) -> None:
    assert store.load_classes() == list(DEFAULT_CLASSES)

    settings = store.load_settings()
    assert settings.dark_mode is False
    assert settings.track_info.name == "Default Track"
    assert settings.default_export_settings.file_name == "race_lineups"
    assert settings.default_export_settings.include_headers is True


def test_classes_round_trip(store: DataStore) -> None:
    classes = [RaceClass(id="a", name="Modifieds", description="Open wheel"), RaceClass(id="b", name="Hornets")]

    store.save_classes(classes)

    assert store.load_classes() == classes
    raw = json.loads(store.path_for("classes").read_text())
    assert raw[1] == {"id": "b", "name": "Hornets"}


def test_empty_class_list_is_respected(store: DataStore) -> None:
    store.save_classes([])

    assert store.load_classes() == []


def test_corrupt_file_falls_back_to_defaults(store: DataStore) -> None:
    path = store.path_for("classes")
    path.write_text("{not json")

    assert store.load_classes() == list(DEFAULT_CLASSES)


def test_invalid_class_rows_are_skipped(store: DataStore) -> None:
    store.path_for("classes").write_text(json.dumps([{"id": "1", "name": "Good"}, {"id": "", "name": "Bad"}, "junk"]))

    assert store.load_classes() == [RaceClass(id="1", name="Good")]


def test_settings_round_trip(store: DataStore) -> None:
    store.save_track_info(TrackInfo(name="Thunder Road", location="Barre, VT"))
    store.save_export_settings(ExportSettings(include_headers=False, file_name="friday"))
    store.save_dark_mode(True)

    settings = store.load_settings()

    assert settings.track_info.name == "Thunder Road"
    assert settings.track_info.location == "Barre, VT"
    assert settings.default_export_settings.include_headers is False
    assert settings.default_export_settings.file_name == "friday"
    assert settings.dark_mode is True


def test_unknown_keys_and_formats_are_ignored(store: DataStore) -> None:
    store.path_for("export_settings").write_text(json.dumps({"exportFormat": "docx", "export_format": "docx", "extra": 1}))

    settings = store.load_settings()

    assert settings.default_export_settings.export_format == "pdf"


def test_data_dir_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("STAGINGBOSS_DATA_DIR", str(tmp_path / "env"))

    store = DataStore()

    assert store.data_dir == tmp_path / "env"
    assert store.path_for("track_info").name == "stagingboss_track_info.json"


def test_write_failure_raises_runtime_error(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    store = DataStore(data_dir=blocker)

    with pytest.raises(RuntimeError, match="Failed to write local data store"):
        store.save_dark_mode(True)
