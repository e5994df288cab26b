from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .items import Proposal, SchedulableItem, ServiceSession, Talk
from .period import Interval, TimeOfDay


@dataclass(frozen=True)
class ScheduledEntry:
    item: SchedulableItem
    interval: Interval

    @classmethod
    def place(cls, item: SchedulableItem, start: TimeOfDay) -> "ScheduledEntry":
        return cls(item, Interval.at(start, item.duration))

    @property
    def start(self) -> TimeOfDay:
        return self.interval.start

    @property
    def end(self) -> TimeOfDay:
        return self.interval.end

    @property
    def is_talk(self) -> bool:
        return isinstance(self.item, Talk)

    @property
    def is_service(self) -> bool:
        return isinstance(self.item, ServiceSession)

    @property
    def proposal(self) -> Optional[Proposal]:
        return self.item.proposal if isinstance(self.item, Talk) else None

    @property
    def title(self) -> str:
        return self.item.title


@dataclass(frozen=True)
class Track:
    title: str
    description: str = ""
    entries: Tuple[ScheduledEntry, ...] = ()

    def with_entries(self, entries: Iterable[ScheduledEntry]) -> "Track":
        return replace(self, entries=tuple(entries))

    def insert(self, entry: ScheduledEntry) -> "Track":
        # Stable sort keeps insertion order between equal starts
        ordered = sorted(self.entries + (entry,), key=lambda e: e.start)
        return self.with_entries(ordered)

    def without(self, entry: ScheduledEntry) -> "Track":
        out: List[ScheduledEntry] = list(self.entries)
        out.remove(entry)
        return self.with_entries(out)

    def replace_at(self, index: int, entry: ScheduledEntry) -> "Track":
        out = list(self.entries)
        out[index] = entry
        return self.with_entries(out)

    def by_start(self) -> List[ScheduledEntry]:
        return sorted(self.entries, key=lambda e: e.start)

    def find_talk(self, proposal_id: str, start: TimeOfDay | None = None) -> Optional[ScheduledEntry]:
        for e in self.entries:
            p = e.proposal
            if p is not None and p.id == proposal_id and (start is None or e.start == start):
                return e
        return None

    def talk_at(self, start: TimeOfDay) -> Optional[ScheduledEntry]:
        for e in self.entries:
            if e.is_talk and e.start == start:
                return e
        return None

    def talk_minutes(self) -> int:
        return sum(e.interval.duration for e in self.entries if e.is_talk)


@dataclass(frozen=True)
class DaySchedule:
    id: str
    date: str
    tracks: Tuple[Track, ...] = ()

    def with_tracks(self, tracks: Iterable[Track]) -> "DaySchedule":
        return replace(self, tracks=tuple(tracks))

    def replace_track(self, index: int, track: Track) -> "DaySchedule":
        tracks = list(self.tracks)
        tracks[index] = track
        return self.with_tracks(tracks)

    def has_track(self, index: int) -> bool:
        return 0 <= index < len(self.tracks)

    def iter_entries(self) -> Iterator[Tuple[int, ScheduledEntry]]:
        for ti, t in enumerate(self.tracks):
            for e in t.entries:
                yield ti, e

    def placed_proposal_ids(self) -> Set[str]:
        return {e.proposal.id for _, e in self.iter_entries() if e.proposal is not None}


@dataclass(frozen=True)
class ConferenceScheduleSet:
    days: Tuple[DaySchedule, ...] = ()
    unassigned: Tuple[Proposal, ...] = ()
    catalog: Tuple[Proposal, ...] = field(default=(), compare=False)

    @classmethod
    def from_catalog(
        cls, days: Iterable[DaySchedule], proposals: Iterable[Proposal]
    ) -> "ConferenceScheduleSet":
        # Unassigned = catalog minus anything placed on any day, catalog order kept
        days = tuple(days)
        proposals = tuple(proposals)
        placed: Set[str] = set()
        for d in days:
            placed |= d.placed_proposal_ids()
        unassigned = tuple(p for p in proposals if p.id not in placed)
        return cls(days=days, unassigned=unassigned, catalog=proposals)

    def placed_proposal_ids(self) -> Set[str]:
        out: Set[str] = set()
        for d in self.days:
            out |= d.placed_proposal_ids()
        return out

    def replace_day(self, index: int, day: DaySchedule) -> "ConferenceScheduleSet":
        days = list(self.days)
        days[index] = day
        return replace(self, days=tuple(days))
