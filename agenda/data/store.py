from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Protocol

from ..models.items import Proposal
from ..models.schedule import DaySchedule
from .codec import day_from_document, day_to_document


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    schedule: DaySchedule | None = None  # canonical echo of what was stored
    error: str | None = None


class ScheduleStore(Protocol):
    async def commit(self, day: DaySchedule) -> SaveResult: ...


class JsonFileStore:
    """Whole-document replace of one day under ``<root>/data/schedules``."""

    def __init__(self, root: Path, proposals: Mapping[str, Proposal]):
        self.dir = Path(root) / "data" / "schedules"
        self.proposals = proposals

    def path_for(self, day: DaySchedule) -> Path:
        return self.dir / f"{day.date}.json"

    def _write(self, day: DaySchedule) -> DaySchedule:
        self.dir.mkdir(parents=True, exist_ok=True)
        if not day.id:
            day = replace(day, id=f"schedule-{uuid.uuid4().hex[:12]}")
        doc = day_to_document(day)
        tmp = self.path_for(day).with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(doc, f, indent=2)
        tmp.replace(self.path_for(day))
        # Echo what is on disk so callers reconcile against the stored form
        with self.path_for(day).open("r", encoding="utf-8") as f:
            return day_from_document(json.load(f), self.proposals)

    async def commit(self, day: DaySchedule) -> SaveResult:
        logger = logging.getLogger(__name__)
        try:
            saved = await asyncio.to_thread(self._write, day)
        except OSError as e:
            logger.error(f"Saving {day.date} failed: {e}")
            return SaveResult(False, error=str(e))
        logger.info(f"Saved {day.date} -> {self.path_for(saved)}")
        return SaveResult(True, schedule=saved)
