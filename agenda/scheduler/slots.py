from __future__ import annotations

from typing import Iterable, List, Optional

from ..config import DEFAULT_CONFIG, EditorConfig
from ..models.items import SchedulableItem
from ..models.period import Interval, TimeOfDay
from ..models.schedule import ScheduledEntry, Track


def grid_slots(config: EditorConfig = DEFAULT_CONFIG) -> List[TimeOfDay]:
    # Every candidate start in the window, end exclusive
    step = config.slot_minutes
    return [
        TimeOfDay(m)
        for m in range(config.window_start.minutes, config.window_end.minutes, step)
    ]


def candidate_interval(start: TimeOfDay, duration: int, config: EditorConfig = DEFAULT_CONFIG) -> Optional[Interval]:
    """Interval for ``duration`` minutes from ``start``, or None if it is off the grid
    or leaves the window."""
    if duration <= 0:
        return None
    if not start.on_grid(config.slot_minutes):
        return None
    if start < config.window_start:
        return None
    end_minutes = start.minutes + duration
    if end_minutes > config.window_end.minutes:
        return None
    return Interval(start, TimeOfDay(end_minutes))


def conflicts(
    entries: Iterable[ScheduledEntry],
    interval: Interval,
    exclude: Iterable[ScheduledEntry] | ScheduledEntry | None = None,
) -> List[ScheduledEntry]:
    skip = _exclusions(exclude)
    out: List[ScheduledEntry] = []
    for e in entries:
        if e in skip:
            continue
        if e.interval.overlaps(interval):
            out.append(e)
    return out


def _exclusions(exclude: Iterable[ScheduledEntry] | ScheduledEntry | None) -> List[ScheduledEntry]:
    if exclude is None:
        return []
    if isinstance(exclude, ScheduledEntry):
        return [exclude]
    return list(exclude)


def is_free(
    track: Track,
    duration: int,
    start: TimeOfDay,
    exclude: Iterable[ScheduledEntry] | ScheduledEntry | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> bool:
    iv = candidate_interval(start, duration, config)
    if iv is None:
        return False
    return not conflicts(track.entries, iv, exclude)


def find_available_slot(
    track: Track,
    item: SchedulableItem,
    desired_start: TimeOfDay,
    exclude: Iterable[ScheduledEntry] | ScheduledEntry | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> Optional[TimeOfDay]:
    """Nearest start at or around ``desired_start`` where ``item`` fits in ``track``.

    The desired start is returned unchanged when it is free. Otherwise the
    search steps outward one grid step at a time in both directions; at
    equal distance the earlier candidate wins. Returns None when nothing
    in the window fits, or when ``desired_start`` is off the grid.
    Pure: safe to call on every drag-over.
    """
    duration = item.duration
    step = config.slot_minutes
    if not desired_start.on_grid(step):
        return None
    if is_free(track, duration, desired_start, exclude, config):
        return desired_start
    lo = config.window_start.minutes
    hi = config.window_end.minutes - duration
    if hi < lo:
        return None
    k = 1
    while True:
        before = desired_start.minutes - k * step
        after = desired_start.minutes + k * step
        if before < lo and after > hi:
            return None
        if before >= lo and is_free(track, duration, TimeOfDay(before), exclude, config):
            return TimeOfDay(before)
        if lo <= after <= hi and is_free(track, duration, TimeOfDay(after), exclude, config):
            return TimeOfDay(after)
        k += 1


def can_drop(
    track: Track,
    item: SchedulableItem,
    desired_start: TimeOfDay,
    exclude: Iterable[ScheduledEntry] | ScheduledEntry | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> bool:
    return find_available_slot(track, item, desired_start, exclude, config) == desired_start
