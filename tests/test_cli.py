from __future__ import annotations

import json
import shutil
from pathlib import Path

from typer.testing import CliRunner

from agenda.cli.main import app, run_edit_script
from agenda.data.loader import load_schedule_set

ROOT = Path(__file__).resolve().parents[1]
runner = CliRunner()


def project_copy(tmp_path: Path) -> Path:
    shutil.copytree(ROOT / "data", tmp_path / "data")
    shutil.copytree(ROOT / "configs", tmp_path / "configs")
    return tmp_path


def test_validate_command(tmp_path: Path) -> None:
    root = project_copy(tmp_path)
    result = runner.invoke(app, ["validate", "--root", str(root)])
    assert result.exit_code == 0, result.output
    assert "overlap_count: 0" in result.output
    assert (root / "outputs" / "validation.json").exists()


def test_find_slot_command(tmp_path: Path) -> None:
    root = project_copy(tmp_path)
    # p-107 (45 min) at 09:15 on Main Stage: 08:00-10:25 is packed, next free start is 10:25
    result = runner.invoke(app, ["find-slot", "--root", str(root), "--start", "09:15", "--proposal", "p-107"])
    assert result.exit_code == 0, result.output
    assert result.output.strip().splitlines()[-1] == "10:25"

    free = runner.invoke(app, ["find-slot", "--root", str(root), "--start", "13:00", "--duration", "30", "--track", "1"])
    assert free.output.strip().splitlines()[-1] == "13:00"

    bad = runner.invoke(app, ["find-slot", "--root", str(root), "--start", "13:00"])
    assert bad.exit_code != 0


def test_export_csv_command(tmp_path: Path) -> None:
    root = project_copy(tmp_path)
    result = runner.invoke(app, ["export-csv", "--root", str(root)])
    assert result.exit_code == 0, result.output
    assert (root / "outputs" / "program.csv").read_text(encoding="utf-8").startswith("Date,Track,Start")


def test_run_edit_script_applies_and_saves(tmp_path: Path) -> None:
    root = project_copy(tmp_path)
    validation, audit = run_edit_script(root, root / "data" / "edits" / "example.json")
    assert "overlap_count: 0" in validation
    assert "unassigned_count: 2" in validation
    assert "rejected" not in audit
    assert "skipped tracks [1]" in audit
    assert audit.count("saved") == 2

    schedule_set, _ = load_schedule_set(root)
    assert [p.id for p in schedule_set.unassigned] == ["p-106", "p-107"]
    day1 = json.loads((root / "data" / "schedules" / "2025-10-29.json").read_text(encoding="utf-8"))
    room2 = day1["tracks"][1]["entries"]
    assert {"talkRef": "p-103", "start": "09:45", "end": "09:55"} in room2
    assert {"label": "Lunch", "start": "12:00", "end": "13:00"} in room2
    day2 = json.loads((root / "data" / "schedules" / "2025-10-30.json").read_text(encoding="utf-8"))
    assert day2["tracks"][1]["title"] == "Community Stage"
    assert (root / "outputs" / "audit.txt").read_text(encoding="utf-8") == audit


def test_apply_without_save_leaves_files(tmp_path: Path) -> None:
    root = project_copy(tmp_path)
    before = (root / "data" / "schedules" / "2025-10-29.json").read_text(encoding="utf-8")
    result = runner.invoke(app, ["apply", str(root / "data" / "edits" / "example.json"), "--no-save", "--root", str(root)])
    assert result.exit_code == 0, result.output
    assert "Edits:" in result.output
    assert (root / "data" / "schedules" / "2025-10-29.json").read_text(encoding="utf-8") == before
