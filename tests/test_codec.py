from __future__ import annotations

import asyncio
import json
import shutil
from pathlib import Path

import pytest

from agenda.data.catalog import ProposalCatalog
from agenda.data.codec import ScheduleDataError, day_from_document, day_to_document, entry_from_dict
from agenda.data.loader import load_schedule_set
from agenda.data.store import JsonFileStore
from agenda.models import DaySchedule, Format, Status

ROOT = Path(__file__).resolve().parents[1]


def sample_root(tmp_path: Path) -> Path:
    shutil.copytree(ROOT / "data", tmp_path / "data")
    shutil.copytree(ROOT / "configs", tmp_path / "configs")
    return tmp_path


def test_catalog_reads_proposals() -> None:
    data = json.loads((ROOT / "data" / "proposals.json").read_text(encoding="utf-8"))
    catalog = ProposalCatalog(data)
    assert len(catalog) == 8
    p = catalog.get("p-104")
    assert p is not None and p.format is Format.workshop_120 and p.duration == 120
    assert [p.id for p in catalog.with_status(Status.withdrawn)] == ["p-106"]


def test_loader_builds_days_and_pool() -> None:
    schedule_set, catalog = load_schedule_set(ROOT)
    assert [d.date for d in schedule_set.days] == ["2025-10-29", "2025-10-30"]
    assert [p.id for p in schedule_set.unassigned] == ["p-103", "p-106", "p-107", "p-108"]
    main = schedule_set.days[0].tracks[0]
    assert main.title == "Main Stage"
    assert [e.title for e in main.entries][0] == "Registration"
    assert main.entries[1].proposal == catalog.get("p-101")


def test_document_shape_round_trips() -> None:
    schedule_set, catalog = load_schedule_set(ROOT)
    day = schedule_set.days[0]
    doc = day_to_document(day)
    assert doc["id"] == "schedule-day1"
    assert doc["tracks"][0]["entries"][1] == {"talkRef": "p-101", "start": "09:00", "end": "09:45"}
    assert doc["tracks"][0]["entries"][0] == {"label": "Registration", "start": "08:00", "end": "09:00"}
    assert day_from_document(doc, catalog.by_id()) == day


def test_unknown_talk_reference_is_rejected() -> None:
    with pytest.raises(ScheduleDataError):
        entry_from_dict({"talkRef": "p-999", "start": "09:00", "end": "09:30"}, {})


@pytest.mark.parametrize(
    "raw",
    [
        {"label": "Break", "start": "09:00"},
        {"start": "09:00", "end": "09:30"},
    ],
)
def test_malformed_entries_are_rejected(raw) -> None:
    with pytest.raises(ScheduleDataError):
        entry_from_dict(raw, {})


def test_day_document_needs_date() -> None:
    with pytest.raises(ScheduleDataError):
        day_from_document({"id": "x", "tracks": []}, {})


def test_json_store_assigns_id_and_echoes(tmp_path: Path) -> None:
    root = sample_root(tmp_path)
    schedule_set, catalog = load_schedule_set(root)
    store = JsonFileStore(root, catalog.by_id())

    fresh = DaySchedule("", "2025-10-31", schedule_set.days[1].tracks)
    result = asyncio.run(store.commit(fresh))
    assert result.ok
    assert result.schedule is not None
    assert result.schedule.id.startswith("schedule-")
    assert result.schedule.tracks == fresh.tracks

    written = json.loads((root / "data" / "schedules" / "2025-10-31.json").read_text(encoding="utf-8"))
    assert written["id"] == result.schedule.id
    reloaded, _ = load_schedule_set(root)
    assert [d.date for d in reloaded.days][-1] == "2025-10-31"


def test_json_store_reports_write_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "data"
    blocker.write_text("not a directory", encoding="utf-8")
    store = JsonFileStore(tmp_path, {})
    result = asyncio.run(store.commit(DaySchedule("d", "2025-10-29")))
    assert not result.ok
    assert result.error
