from __future__ import annotations

from pathlib import Path

import pytest

from agenda.config import DEFAULT_CONFIG, EditorConfig, load_config
from agenda.models.period import FormatError, TimeOfDay


def test_repo_config_matches_defaults() -> None:
    root = Path(__file__).resolve().parents[1]
    assert load_config(root) == DEFAULT_CONFIG
    assert str(DEFAULT_CONFIG.window_start) == "08:00"
    assert str(DEFAULT_CONFIG.window_end) == "21:00"


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path) == DEFAULT_CONFIG


def test_overrides_from_toml(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "editor.toml").write_text(
        '[editor]\nwindow_start = "09:00"\nwindow_end = "18:00"\ndefault_service_minutes = 15\nslot_minutes = "lots"\n',
        encoding="utf-8",
    )
    cfg = load_config(tmp_path)
    assert cfg.window_start == TimeOfDay.parse("09:00")
    assert cfg.window_end == TimeOfDay.parse("18:00")
    assert cfg.default_service_minutes == 15
    assert cfg.slot_minutes == 5


def test_top_level_keys_are_accepted(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "editor.toml").write_text("service_max_minutes = 120\n", encoding="utf-8")
    assert load_config(tmp_path).service_max_minutes == 120


def test_malformed_window_time_fails(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "editor.toml").write_text('[editor]\nwindow_start = "8am"\n', encoding="utf-8")
    with pytest.raises(FormatError):
        load_config(tmp_path)


def test_inverted_window_is_rejected() -> None:
    with pytest.raises(ValueError):
        EditorConfig(window_start=TimeOfDay.parse("18:00"), window_end=TimeOfDay.parse("09:00"))
