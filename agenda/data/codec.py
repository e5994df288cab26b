from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..models.items import Proposal, ServiceSession, Talk
from ..models.period import Interval
from ..models.schedule import DaySchedule, ScheduledEntry, Track


class ScheduleDataError(ValueError):
    """A persisted day document is structurally wrong or references unknown talks."""


def entry_to_dict(e: ScheduledEntry) -> Dict[str, str]:
    if isinstance(e.item, Talk):
        return {"talkRef": e.item.proposal.id, "start": str(e.start), "end": str(e.end)}
    return {"label": e.item.label, "start": str(e.start), "end": str(e.end)}


def day_to_document(day: DaySchedule) -> Dict[str, Any]:
    return {
        "id": day.id,
        "date": day.date,
        "tracks": [
            {
                "title": t.title,
                "description": t.description,
                "entries": [entry_to_dict(e) for e in t.entries],
            }
            for t in day.tracks
        ],
    }


def entry_from_dict(raw: Mapping[str, Any], proposals: Mapping[str, Proposal]) -> ScheduledEntry:
    try:
        interval = Interval.parse(raw["start"], raw["end"])
    except KeyError as e:
        raise ScheduleDataError(f"entry missing {e.args[0]!r}: {dict(raw)}") from e
    if "talkRef" in raw:
        ref = str(raw["talkRef"])
        proposal = proposals.get(ref)
        if proposal is None:
            raise ScheduleDataError(f"unknown talk reference {ref!r}")
        return ScheduledEntry(Talk(proposal), interval)
    if "label" in raw:
        return ScheduledEntry(ServiceSession(str(raw["label"]), interval.duration), interval)
    raise ScheduleDataError(f"entry needs talkRef or label: {dict(raw)}")


def day_from_document(doc: Mapping[str, Any], proposals: Mapping[str, Proposal]) -> DaySchedule:
    if "date" not in doc:
        raise ScheduleDataError("day document has no date")
    tracks: List[Track] = []
    for t in doc.get("tracks", []) or []:
        entries = [entry_from_dict(e, proposals) for e in t.get("entries", []) or []]
        tracks.append(Track(str(t.get("title", "")), str(t.get("description", "") or ""), tuple(entries)))
    return DaySchedule(id=str(doc.get("id", "") or ""), date=str(doc["date"]), tracks=tuple(tracks))
