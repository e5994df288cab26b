from __future__ import annotations

import json
from pathlib import Path
from typing import Dict


def write_validation_report(report: Dict[str, object], outputs_dir: Path) -> None:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    with (outputs_dir / "validation.json").open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)


def format_validation_report(report: Dict[str, object]) -> str:
    lines: list[str] = []
    lines.append(f"overlap_count: {report.get('overlap_count')}")
    violations = report.get("violations_by_rule", {})
    lines.append("violations_by_rule:")
    if isinstance(violations, dict):
        for k, v in violations.items():
            lines.append(f"  - {k}: {len(v)}")
    lines.append(f"unassigned_count: {report.get('unassigned_count')}")
    lines.append("talk_minutes_by_track:")
    minutes = report.get("talk_minutes_by_track", {})
    if isinstance(minutes, dict):
        for date, tracks in minutes.items():
            for title, m in tracks.items():
                lines.append(f"  - {date} {title}: {m}")
    return "\n".join(lines)
