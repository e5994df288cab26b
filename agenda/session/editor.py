from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, Dict, List, Tuple

from ..config import DEFAULT_CONFIG, EditorConfig
from ..data.store import SaveResult, ScheduleStore
from ..models.items import Proposal, SchedulableItem, ServiceSession, Talk
from ..models.period import TimeOfDay
from ..models.schedule import ConferenceScheduleSet, DaySchedule
from ..scheduler import moves, slots
from ..scheduler.moves import EntryRef, MoveResult, Slot


class DayState(str, Enum):
    clean = "clean"
    dirty = "dirty"
    saving = "saving"


def _known_proposals(schedule_set: ConferenceScheduleSet) -> Tuple[Proposal, ...]:
    # Pool first, then placed talks in day/track order
    seen: Dict[str, Proposal] = {p.id: p for p in schedule_set.unassigned}
    for day in schedule_set.days:
        for _, e in day.iter_entries():
            if e.proposal is not None:
                seen.setdefault(e.proposal.id, e.proposal)
    return tuple(seen.values())


class EditSession:
    """One editor's in-memory view of every conference day.

    Holds the schedule set (all days plus the unassigned pool), which day
    is shown, and a per-day save state. Each command runs exactly one
    engine operation against the current day; success replaces the day,
    failure leaves everything as it was. Nothing reaches the store until
    ``save`` is awaited for the current day.
    """

    def __init__(
        self,
        schedule_set: ConferenceScheduleSet,
        store: ScheduleStore | None = None,
        config: EditorConfig = DEFAULT_CONFIG,
    ):
        if not schedule_set.days:
            raise ValueError("edit session needs at least one day")
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.store = store
        self._set = schedule_set
        self._catalog: Tuple[Proposal, ...] = schedule_set.catalog or _known_proposals(schedule_set)
        self.current_index = 0
        # Bumped on every accepted edit; a day is dirty while it differs from the saved version
        self._versions: List[int] = [0] * len(schedule_set.days)
        self._saved_versions: List[int] = [0] * len(schedule_set.days)
        self._saving: Dict[int, int] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self.audit: List[str] = []
        self.last_error: str | None = None

    # -- read side -------------------------------------------------------
    @property
    def schedule_set(self) -> ConferenceScheduleSet:
        return self._set

    @property
    def days(self) -> Tuple[DaySchedule, ...]:
        return self._set.days

    @property
    def current(self) -> DaySchedule:
        return self._set.days[self.current_index]

    @property
    def unassigned(self) -> Tuple[Proposal, ...]:
        return self._set.unassigned

    def state(self, index: int | None = None) -> DayState:
        i = self.current_index if index is None else index
        if i in self._saving:
            return DayState.saving
        return DayState.dirty if self.is_dirty(i) else DayState.clean

    def is_dirty(self, index: int | None = None) -> bool:
        i = self.current_index if index is None else index
        return self._versions[i] != self._saved_versions[i]

    def dirty_days(self) -> List[int]:
        return [i for i in range(len(self.days)) if self.is_dirty(i)]

    # -- navigation ------------------------------------------------------
    def select_day(self, index: int) -> bool:
        if not 0 <= index < len(self.days):
            self.logger.warning(f"No conference day at index {index}")
            return False
        # Days live in one aggregate, so leaving a day keeps its edits as-is
        self.current_index = index
        self.last_error = None
        return True

    # -- edits -------------------------------------------------------------
    def apply(self, op: Callable[..., MoveResult], *args, **kwargs) -> MoveResult:
        before = self.current
        result = op(before, *args, **kwargs)
        if not result.success:
            self.audit.append(f"[{before.date}] rejected: {result.reason}")
            return result
        if result.schedule is before:
            return result
        # A talk may only be placed once across all days
        pool = {p.id for p in self._set.unassigned}
        stray = [p.id for p in result.placed if p.id not in pool]
        if stray:
            reason = f"{', '.join(stray)} is not unassigned"
            self.logger.warning(f"Rejected edit on {before.date}: {reason}")
            self.audit.append(f"[{before.date}] rejected: {reason}")
            return MoveResult(False, before, reason=reason)
        self._commit_day(result)
        return result

    def _commit_day(self, result: MoveResult) -> None:
        i = self.current_index
        placed = {p.id for p in result.placed}
        released = {p.id for p in result.released}
        pool = {p.id for p in self._set.unassigned}
        pool = (pool - placed) | released
        unassigned = tuple(p for p in self._catalog if p.id in pool)
        self._set = replace(self._set.replace_day(i, result.schedule), unassigned=unassigned)
        self._versions[i] += 1
        note = f"[{result.schedule.date}] ok"
        if result.skipped:
            note += f" (skipped tracks {list(result.skipped)})"
        self.audit.append(note)

    def drop_talk(self, proposal: Proposal, target: Slot, source: EntryRef | None = None) -> MoveResult:
        """Route a talk drop: swap onto another talk's start, otherwise exact move."""
        if source is None and proposal.id not in {p.id for p in self.unassigned}:
            self.audit.append(f"[{self.current.date}] rejected: {proposal.id} is not unassigned")
            self.logger.warning(f"Talk {proposal.id} is not in the unassigned pool")
            return MoveResult(False, self.current, reason="talk is not unassigned")
        if source is not None and self.current.has_track(target.track_index):
            occupant = self.current.tracks[target.track_index].talk_at(target.start)
            if occupant is not None and occupant.proposal.id != proposal.id:
                return self.apply(moves.swap_talks, proposal, source, target, self.config)
        return self.apply(moves.move_talk, proposal, target, source, self.config)

    def move_service_session(self, session: ServiceSession, target: Slot, source: EntryRef | None = None) -> MoveResult:
        return self.apply(moves.move_service_session, session, target, source, self.config)

    def create_service_session(self, track_index: int, start: TimeOfDay, label: str, duration: int | None = None) -> MoveResult:
        minutes = self.config.default_service_minutes if duration is None else duration
        return self.apply(moves.create_service_session, track_index, start, label, minutes, self.config)

    def resize_service_session(self, track_index: int, entry_index: int, duration: float) -> MoveResult:
        return self.apply(moves.resize_service_session, track_index, entry_index, duration, self.config)

    def rename_service_session(self, track_index: int, entry_index: int, label: str) -> MoveResult:
        return self.apply(moves.rename_service_session, track_index, entry_index, label)

    def remove_entry(self, track_index: int, entry_index: int) -> MoveResult:
        return self.apply(moves.remove_entry, track_index, entry_index)

    def duplicate_service_session(self, track_index: int, entry_index: int) -> MoveResult:
        return self.apply(moves.duplicate_service_session, track_index, entry_index)

    def add_track(self, title: str, description: str = "") -> MoveResult:
        return self.apply(moves.add_track, title, description)

    def remove_track(self, track_index: int) -> MoveResult:
        return self.apply(moves.remove_track, track_index)

    def update_track(self, track_index: int, title: str, description: str = "") -> MoveResult:
        return self.apply(moves.update_track, track_index, title, description)

    def can_drop(self, item: SchedulableItem, target: Slot, source: EntryRef | None = None) -> bool:
        """Read-only drop check used while a drag hovers over ``target``."""
        day = self.current
        if not day.has_track(target.track_index):
            return False
        track = day.tracks[target.track_index]
        if isinstance(item, Talk) and source is not None:
            occupant = track.talk_at(target.start)
            if occupant is not None and occupant.proposal.id != item.proposal.id:
                return moves.can_swap(day, item.proposal, source, target, self.config)
        exclude = None
        if source is not None and source.track_index == target.track_index:
            exclude = [e for e in track.entries if e.start == source.start and e.item == item]
            if not exclude and isinstance(item, ServiceSession):
                exclude = [e for e in track.entries if e.start == source.start and e.is_service]
        return slots.can_drop(track, item, target.start, exclude, self.config)

    # -- persistence -------------------------------------------------------
    def _lock_for(self, index: int) -> asyncio.Lock:
        if index not in self._locks:
            self._locks[index] = asyncio.Lock()
        return self._locks[index]

    async def save(self) -> SaveResult:
        """Hand the whole current day to the store.

        Saves for one day are serialized; edits keep landing in memory while
        a save is in flight. A failed save keeps every edit and leaves the day
        dirty for a retry.
        """
        if self.store is None:
            raise RuntimeError("edit session has no schedule store")
        index = self.current_index
        async with self._lock_for(index):
            day = self._set.days[index]
            version = self._versions[index]
            self._saving[index] = version
            try:
                result = await self.store.commit(day)
            except Exception as e:  # transport errors surface as a retryable failure
                self.logger.error(f"Save of {day.date} raised: {e}")
                result = SaveResult(False, error=str(e))
            finally:
                self._saving.pop(index, None)
            if not result.ok:
                self.last_error = result.error or "Failed to save schedule"
                self.audit.append(f"[{day.date}] save failed: {self.last_error}")
                return result
            self.last_error = None
            self._saved_versions[index] = version
            if result.schedule is not None:
                if self._versions[index] == version:
                    self._set = self._set.replace_day(index, result.schedule)
                elif result.schedule.id:
                    # Edits arrived mid-flight; keep them and adopt only the stored id
                    current = self._set.days[index]
                    self._set = self._set.replace_day(index, replace(current, id=result.schedule.id))
            self.audit.append(f"[{day.date}] saved")
            return result
