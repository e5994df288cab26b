from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import DEFAULT_CONFIG, EditorConfig
from ..models.items import Proposal, ServiceSession, Talk
from ..models.period import TimeOfDay
from ..models.schedule import DaySchedule, ScheduledEntry, Track
from .slots import can_drop, candidate_interval, conflicts, is_free

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryRef:
    """Where a dragged entry currently sits: track index plus its start."""

    track_index: int
    start: TimeOfDay


@dataclass(frozen=True)
class Slot:
    """Drop target: track index plus the requested start."""

    track_index: int
    start: TimeOfDay


@dataclass(frozen=True)
class MoveResult:
    success: bool
    schedule: DaySchedule
    placed: Tuple[Proposal, ...] = ()  # taken out of the unassigned pool
    released: Tuple[Proposal, ...] = ()  # returned to the unassigned pool
    skipped: Tuple[int, ...] = ()  # fan-out targets left alone
    reason: str | None = None

    @property
    def updated_schedule(self) -> DaySchedule | None:
        return self.schedule if self.success else None


def _fail(schedule: DaySchedule, reason: str) -> MoveResult:
    logger.warning(f"Rejected edit on {schedule.date or '<new day>'}: {reason}")
    return MoveResult(False, schedule, reason=reason)


def _ok(schedule: DaySchedule, message: str, **kw) -> MoveResult:
    logger.info(message)
    return MoveResult(True, schedule, **kw)


def _entry_at(schedule: DaySchedule, track_index: int, entry_index: int) -> Optional[ScheduledEntry]:
    if not schedule.has_track(track_index):
        return None
    entries = schedule.tracks[track_index].entries
    if not 0 <= entry_index < len(entries):
        return None
    return entries[entry_index]


def _service_at(track: Track, start: TimeOfDay, label: str) -> Optional[ScheduledEntry]:
    for e in track.entries:
        if isinstance(e.item, ServiceSession) and e.start == start and e.item.label == label:
            return e
    return None


def _relocate(
    schedule: DaySchedule,
    source: Optional[Tuple[int, ScheduledEntry]],
    target_index: int,
    new_entry: ScheduledEntry,
) -> DaySchedule:
    day = schedule
    if source is not None:
        si, old = source
        day = day.replace_track(si, day.tracks[si].without(old))
    return day.replace_track(target_index, day.tracks[target_index].insert(new_entry))


def clamp_service_duration(minutes: float, config: EditorConfig = DEFAULT_CONFIG) -> int:
    # Round to the nearest grid step (halves round up), then clamp to bounds
    step = config.slot_minutes
    rounded = int(math.floor(minutes / step + 0.5)) * step
    return max(config.service_min_minutes, min(config.service_max_minutes, rounded))


def valid_service_duration(minutes: int, config: EditorConfig = DEFAULT_CONFIG) -> bool:
    return (
        config.service_min_minutes <= minutes <= config.service_max_minutes
        and minutes % config.slot_minutes == 0
    )


def move_talk(
    schedule: DaySchedule,
    proposal: Proposal,
    target: Slot,
    source: EntryRef | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> MoveResult:
    """Place ``proposal`` at exactly ``target``; never relocates to another start.

    Without ``source`` the talk comes from the unassigned pool and is
    reported in ``placed``. With ``source`` it is lifted from that entry;
    a same-track move ignores its own old entry when checking conflicts.
    """
    if not schedule.has_track(target.track_index):
        return _fail(schedule, f"no track at index {target.track_index}")
    prior: Optional[Tuple[int, ScheduledEntry]] = None
    if source is not None:
        if not schedule.has_track(source.track_index):
            return _fail(schedule, f"no source track at index {source.track_index}")
        found = schedule.tracks[source.track_index].find_talk(proposal.id, source.start)
        if found is None:
            return _fail(schedule, f"talk {proposal.id} not found at {source.start}")
        prior = (source.track_index, found)
    elif proposal.id in schedule.placed_proposal_ids():
        return _fail(schedule, f"talk {proposal.id} is already scheduled")

    item = prior[1].item if prior is not None else Talk(proposal)
    exclude = prior[1] if prior is not None and prior[0] == target.track_index else None
    track = schedule.tracks[target.track_index]
    if not can_drop(track, item, target.start, exclude, config):
        return _fail(schedule, f"'{proposal.title}' does not fit at {target.start} in '{track.title}'")

    day = _relocate(schedule, prior, target.track_index, ScheduledEntry.place(item, target.start))
    return _ok(
        day,
        f"Talk '{proposal.title}' -> '{track.title}' {target.start}",
        placed=(proposal,) if prior is None else (),
    )


def swap_talks(
    schedule: DaySchedule,
    proposal: Proposal,
    source: EntryRef,
    target: Slot,
    config: EditorConfig = DEFAULT_CONFIG,
) -> MoveResult:
    """Exchange the dragged talk with the talk starting at ``target``.

    The dragged talk takes the target's start; the displaced talk takes the
    dragged talk's old start in the source track. Both must fit.
    """
    if not (schedule.has_track(source.track_index) and schedule.has_track(target.track_index)):
        return _fail(schedule, "swap references a missing track")
    a = schedule.tracks[source.track_index].find_talk(proposal.id, source.start)
    b = schedule.tracks[target.track_index].talk_at(target.start)
    if a is None or b is None:
        return _fail(schedule, f"no talk to swap at {target.start}")
    if source.track_index == target.track_index and a == b:
        return _fail(schedule, "cannot swap a talk with itself")

    day = schedule
    day = day.replace_track(source.track_index, day.tracks[source.track_index].without(a))
    day = day.replace_track(target.track_index, day.tracks[target.track_index].without(b))
    if not is_free(day.tracks[target.track_index], a.item.duration, b.start, config=config):
        return _fail(schedule, f"'{a.title}' does not fit at {b.start}")
    day = day.replace_track(target.track_index, day.tracks[target.track_index].insert(ScheduledEntry.place(a.item, b.start)))
    if not is_free(day.tracks[source.track_index], b.item.duration, a.start, config=config):
        return _fail(schedule, f"'{b.title}' does not fit at {a.start}")
    day = day.replace_track(source.track_index, day.tracks[source.track_index].insert(ScheduledEntry.place(b.item, a.start)))
    return _ok(day, f"Swapped '{a.title}' ({a.start}) with '{b.title}' ({b.start})")


def can_swap(
    schedule: DaySchedule,
    proposal: Proposal,
    source: EntryRef,
    target: Slot,
    config: EditorConfig = DEFAULT_CONFIG,
) -> bool:
    return swap_talks(schedule, proposal, source, target, config).success


def move_service_session(
    schedule: DaySchedule,
    session: ServiceSession,
    target: Slot,
    source: EntryRef | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> MoveResult:
    if not schedule.has_track(target.track_index):
        return _fail(schedule, f"no track at index {target.track_index}")
    prior: Optional[Tuple[int, ScheduledEntry]] = None
    item = session
    if source is not None:
        if not schedule.has_track(source.track_index):
            return _fail(schedule, f"no source track at index {source.track_index}")
        found = _service_at(schedule.tracks[source.track_index], source.start, session.label)
        if found is None:
            return _fail(schedule, f"service session '{session.label}' not found at {source.start}")
        prior = (source.track_index, found)
        item = ServiceSession(found.item.label, found.interval.duration)
    elif not valid_service_duration(session.duration, config):
        return _fail(schedule, f"invalid service session duration {session.duration}")

    exclude = prior[1] if prior is not None and prior[0] == target.track_index else None
    track = schedule.tracks[target.track_index]
    if not can_drop(track, item, target.start, exclude, config):
        return _fail(schedule, f"'{item.label}' does not fit at {target.start} in '{track.title}'")
    day = _relocate(schedule, prior, target.track_index, ScheduledEntry.place(item, target.start))
    return _ok(day, f"Service '{item.label}' -> '{track.title}' {target.start}")


def create_service_session(
    schedule: DaySchedule,
    track_index: int,
    start: TimeOfDay,
    label: str,
    duration: int,
    config: EditorConfig = DEFAULT_CONFIG,
) -> MoveResult:
    label = (label or "").strip()
    if not label:
        return _fail(schedule, "service session needs a label")
    return move_service_session(schedule, ServiceSession(label, int(duration)), Slot(track_index, start), config=config)


def resize_service_session(
    schedule: DaySchedule,
    track_index: int,
    entry_index: int,
    duration: float,
    config: EditorConfig = DEFAULT_CONFIG,
) -> MoveResult:
    """Set a service session's length, clamped and snapped to the grid.

    Growing into a neighbouring entry or past the window end is rejected.
    """
    entry = _entry_at(schedule, track_index, entry_index)
    if entry is None or not isinstance(entry.item, ServiceSession):
        return _fail(schedule, f"no service session at track {track_index} entry {entry_index}")
    if not math.isfinite(duration):
        return _fail(schedule, f"invalid service session duration {duration}")
    minutes = clamp_service_duration(duration, config)
    if minutes == entry.interval.duration:
        return MoveResult(True, schedule)
    iv = candidate_interval(entry.start, minutes, config)
    if iv is None:
        return _fail(schedule, f"'{entry.item.label}' would run past {config.window_end}")
    track = schedule.tracks[track_index]
    if conflicts(track.entries, iv, exclude=entry):
        return _fail(schedule, f"'{entry.item.label}' would overlap a neighbour at {iv}")
    resized = ScheduledEntry(ServiceSession(entry.item.label, minutes), iv)
    day = schedule.replace_track(track_index, track.replace_at(entry_index, resized))
    return _ok(day, f"Resized '{entry.item.label}' to {minutes} min ({iv})")


def rename_service_session(
    schedule: DaySchedule,
    track_index: int,
    entry_index: int,
    label: str,
) -> MoveResult:
    label = (label or "").strip()
    if not label:
        return _fail(schedule, "service session needs a label")
    entry = _entry_at(schedule, track_index, entry_index)
    if entry is None or not isinstance(entry.item, ServiceSession):
        return _fail(schedule, f"no service session at track {track_index} entry {entry_index}")
    renamed = ScheduledEntry(ServiceSession(label, entry.item.duration), entry.interval)
    day = schedule.replace_track(track_index, schedule.tracks[track_index].replace_at(entry_index, renamed))
    return _ok(day, f"Renamed '{entry.item.label}' -> '{label}'")


def remove_entry(schedule: DaySchedule, track_index: int, entry_index: int) -> MoveResult:
    entry = _entry_at(schedule, track_index, entry_index)
    if entry is None:
        return _fail(schedule, f"no entry at track {track_index} index {entry_index}")
    track = schedule.tracks[track_index]
    day = schedule.replace_track(track_index, track.without(entry))
    released = (entry.proposal,) if entry.proposal is not None else ()
    return _ok(day, f"Removed '{entry.title}' from '{track.title}'", released=released)


def duplicate_service_session(schedule: DaySchedule, track_index: int, entry_index: int) -> MoveResult:
    """Copy a service session into every other track at the same interval.

    Best-effort fan-out: a track where the interval conflicts is skipped
    and listed in ``skipped``; the rest receive the copy.
    """
    entry = _entry_at(schedule, track_index, entry_index)
    if entry is None or not isinstance(entry.item, ServiceSession):
        return _fail(schedule, f"no service session at track {track_index} entry {entry_index}")
    tracks: List[Track] = list(schedule.tracks)
    skipped: List[int] = []
    copied = 0
    for i, t in enumerate(schedule.tracks):
        if i == track_index:
            continue
        if conflicts(t.entries, entry.interval):
            skipped.append(i)
            continue
        tracks[i] = t.insert(ScheduledEntry(entry.item, entry.interval))
        copied += 1
    if skipped:
        logger.info(f"Fan-out of '{entry.item.label}' skipped tracks {skipped}")
    # Nothing inserted: hand back the same day so callers see no change
    day = schedule.with_tracks(tracks) if copied else schedule
    return _ok(
        day,
        f"Duplicated '{entry.item.label}' {entry.interval} to {copied} track(s)",
        skipped=tuple(skipped),
    )


def add_track(schedule: DaySchedule, title: str, description: str = "") -> MoveResult:
    title = (title or "").strip()
    if not title:
        return _fail(schedule, "track needs a title")
    track = Track(title, (description or "").strip())
    return _ok(schedule.with_tracks(schedule.tracks + (track,)), f"Added track '{title}'")


def remove_track(schedule: DaySchedule, track_index: int) -> MoveResult:
    if not schedule.has_track(track_index):
        return _fail(schedule, f"no track at index {track_index}")
    track = schedule.tracks[track_index]
    released = tuple(e.proposal for e in track.entries if e.proposal is not None)
    tracks = [t for i, t in enumerate(schedule.tracks) if i != track_index]
    return _ok(schedule.with_tracks(tracks), f"Removed track '{track.title}'", released=released)


def update_track(schedule: DaySchedule, track_index: int, title: str, description: str = "") -> MoveResult:
    if not schedule.has_track(track_index):
        return _fail(schedule, f"no track at index {track_index}")
    title = (title or "").strip()
    if not title:
        return _fail(schedule, "track needs a title")
    old = schedule.tracks[track_index]
    track = Track(title, (description or "").strip(), old.entries)
    return _ok(schedule.replace_track(track_index, track), f"Updated track '{old.title}' -> '{title}'")
