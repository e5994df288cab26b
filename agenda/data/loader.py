from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..models.schedule import ConferenceScheduleSet
from .catalog import ProposalCatalog
from .codec import day_from_document


@dataclass
class LoadedData:
    proposals: Dict[str, Any]
    schedules: List[Dict[str, Any]]


def load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_data(root: Path) -> LoadedData:
    data_dir = root / "data"
    schedules_dir = data_dir / "schedules"
    docs: List[Dict[str, Any]] = []
    if schedules_dir.is_dir():
        docs = [load_json(p) for p in sorted(schedules_dir.glob("*.json"))]
    docs.sort(key=lambda d: str(d.get("date", "")))
    return LoadedData(
        proposals=load_json(data_dir / "proposals.json"),
        schedules=docs,
    )


def load_schedule_set(root: Path) -> Tuple[ConferenceScheduleSet, ProposalCatalog]:
    loaded = load_data(root)
    catalog = ProposalCatalog(loaded.proposals)
    lookup = catalog.by_id()
    days = [day_from_document(doc, lookup) for doc in loaded.schedules]
    return ConferenceScheduleSet.from_catalog(days, catalog.records), catalog
