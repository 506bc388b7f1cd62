from __future__ import annotations

import pytest

from lineup_core import (
    ClassRegistryError,
    DataStore,
    EmptyInputError,
    ErrorKind,
    LineupSession,
    NoClassSelectedError,
)


@pytest.fixture
def session(tmp_path) -> LineupSession:
    return LineupSession(DataStore(data_dir=tmp_path))


def test_process_stores_lineup_and_reports_messages(session: LineupSession) -> None:
    raw = "7\tAnn\t5\n9\tBo\t5\n3\n4\tCy\tnope"

    outcome = session.process(raw, "3")

    assert outcome.lineup is not None
    assert [(e.driver_name, e.draw_number) for e in outcome.lineup.entrants] == [("Ann", 5), ("Bo", 6), ("Cy", None)]
    assert [e.kind for e in outcome.parse_errors] == [ErrorKind.MALFORMED_ROW, ErrorKind.INVALID_DRAW_NUMBER]
    assert outcome.messages[0].startswith("Line 3:")
    assert session.lineups() == [outcome.lineup]


def test_processing_one_class_keeps_other_lineups(session: LineupSession) -> None:
    session.process("1\tAnn\t1", "1")
    session.process("2\tBo\t1", "2")
    session.process("5\tCy\t2\n6\tDee\t1", "1")

    lineups = {lineup.class_id: lineup for lineup in session.lineups()}

    assert set(lineups) == {"1", "2"}
    assert [e.driver_name for e in lineups["1"].entrants] == ["Dee", "Cy"]
    assert [e.driver_name for e in lineups["2"].entrants] == ["Bo"]


def test_batch_with_no_valid_rows_yields_empty_lineup(session: LineupSession) -> None:
    session.process("1\tAnn", "1")

    outcome = session.process("bad\n\t\t5", "1")

    assert outcome.lineup is not None
    assert outcome.lineup.entrants == ()
    assert len(outcome.parse_errors) == 2
    assert session.store.get("1").entrants == ()


def test_preconditions(session: LineupSession) -> None:
    with pytest.raises(EmptyInputError):
        session.process("  ", "1")
    with pytest.raises(NoClassSelectedError):
        session.process("1\tAnn", None)
    with pytest.raises(LookupError):
        session.process("1\tAnn", "missing")


def test_empty_registry_blocks_processing(session: LineupSession) -> None:
    for race_class in session.classes():
        session.remove_class(race_class.id)

    with pytest.raises(ClassRegistryError):
        session.process("1\tAnn", "1")


def test_remove_class_cascades_to_lineups(session: LineupSession) -> None:
    session.process("1\tAnn", "1")
    session.process("2\tBo", "2")

    session.remove_class("1")

    assert [lineup.class_id for lineup in session.lineups()] == ["2"]
    assert session.registry.find_class("1") is None


def test_class_changes_are_persisted(tmp_path) -> None:
    first = LineupSession(DataStore(data_dir=tmp_path))
    added = first.add_class("Hornets", description="Four cylinder", class_id="h")
    first.update_class("3", "Street Stocks")
    first.remove_class("2")

    second = LineupSession(DataStore(data_dir=tmp_path))

    assert [c.id for c in second.classes()] == ["1", "3", "h"]
    assert second.registry.find_class("3").name == "Street Stocks"
    assert second.registry.find_class("h") == added


def test_add_class_validation(session: LineupSession) -> None:
    generated = session.add_class("Mini Stocks")
    assert generated.id

    with pytest.raises(ValueError):
        session.add_class("   ")
    with pytest.raises(ValueError):
        session.add_class("Duplicate", class_id="1")
    with pytest.raises(LookupError):
        session.update_class("missing", "Name")


def test_renaming_class_relabels_stored_lineup(session: LineupSession) -> None:
    session.process("1\tAnn", "3")

    session.update_class("3", "Pure Stock")

    assert session.store.get("3").class_name == "Pure Stock"


def test_settings_updates_are_persisted(tmp_path) -> None:
    first = LineupSession(DataStore(data_dir=tmp_path))
    first.update_track_info({"name": "Thunder Road"})
    first.update_export_settings({"include_headers": False})
    first.set_dark_mode(True)

    second = LineupSession(DataStore(data_dir=tmp_path))

    assert second.settings.track_info.name == "Thunder Road"
    assert second.settings.default_export_settings.include_headers is False
    assert second.settings.dark_mode is True


def test_clear_lineups(session: LineupSession) -> None:
    session.process("1\tAnn", "1")
    session.clear_lineups()

    assert session.lineups() == []


def test_export_requires_lineups(session: LineupSession) -> None:
    with pytest.raises(RuntimeError, match="no lineups"):
        session.export("csv")


def test_export_formats(session: LineupSession) -> None:
    session.process("7\tAnn Lee\t1", "1")

    document = session.export("csv")
    assert document.file_name == "race_lineups.csv"
    assert "Ann Lee" in document.content

    html_document = session.export("html")
    assert html_document.media_type.startswith("text/html")
    assert "7 (A. Lee)" in html_document.content

    with pytest.raises(ValueError):
        session.export("docx")


def test_sample_data_uses_registry(session: LineupSession) -> None:
    assert len(session.sample_data().splitlines()) == 3 * len(session.classes())
