from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .models.period import TimeOfDay


@dataclass(frozen=True)
class EditorConfig:
    window_start: TimeOfDay = TimeOfDay(8 * 60)
    window_end: TimeOfDay = TimeOfDay(21 * 60)
    slot_minutes: int = 5
    service_min_minutes: int = 5
    service_max_minutes: int = 180
    default_service_minutes: int = 10

    def __post_init__(self) -> None:
        if self.window_end <= self.window_start:
            raise ValueError(f"window_end {self.window_end} must be after window_start {self.window_start}")
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")


DEFAULT_CONFIG = EditorConfig()


def _project_root() -> Path:
    # agenda/config.py -> project root is parents[1]
    return Path(__file__).resolve().parents[1]


def load_config(project_root: Path | str | None = None) -> EditorConfig:
    """Load editor settings from configs/editor.toml if present, else defaults.

    Keys may sit at top level or under [editor]:
      - window_start, window_end ("HH:MM")
      - slot_minutes, service_min_minutes, service_max_minutes,
        default_service_minutes
    Malformed times raise FormatError; unparsable integers keep the default.
    """
    base = DEFAULT_CONFIG
    root: Path = _project_root() if project_root is None else Path(project_root)
    cfg = root / "configs" / "editor.toml"
    if not cfg.exists():
        return base
    data: Dict[str, Any] = tomllib.loads(cfg.read_text(encoding="utf-8"))
    w = data.get("editor") if isinstance(data.get("editor"), dict) else data

    def get_int(name: str, default: int) -> int:
        try:
            return int(w.get(name, default))
        except (TypeError, ValueError):
            return default

    def get_time(name: str, default: TimeOfDay) -> TimeOfDay:
        raw = w.get(name)
        if raw is None:
            return default
        return TimeOfDay.parse(str(raw))

    return EditorConfig(
        window_start=get_time("window_start", base.window_start),
        window_end=get_time("window_end", base.window_end),
        slot_minutes=get_int("slot_minutes", base.slot_minutes),
        service_min_minutes=get_int("service_min_minutes", base.service_min_minutes),
        service_max_minutes=get_int("service_max_minutes", base.service_max_minutes),
        default_service_minutes=get_int("default_service_minutes", base.default_service_minutes),
    )
