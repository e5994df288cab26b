from __future__ import annotations

from collections import Counter, defaultdict
from typing import Dict, List

from ..config import DEFAULT_CONFIG, EditorConfig
from ..models.schedule import ConferenceScheduleSet


def validate_set(
    schedule_set: ConferenceScheduleSet,
    config: EditorConfig = DEFAULT_CONFIG,
) -> Dict[str, object]:
    report: Dict[str, object] = {}
    violations_by_rule: Dict[str, List[str]] = defaultdict(list)

    # Overlaps: pairwise within each track, half-open
    overlaps = 0
    for day in schedule_set.days:
        for t in day.tracks:
            ordered = t.by_start()
            for i, a in enumerate(ordered):
                for b in ordered[i + 1:]:
                    if b.start >= a.end:
                        break
                    overlaps += 1
                    violations_by_rule["track_overlap"].append(
                        f"{day.date} {t.title}: {a.title} {a.interval} x {b.title} {b.interval}"
                    )
    report["overlap_count"] = overlaps

    # Window and grid
    step = config.slot_minutes
    for day in schedule_set.days:
        for ti, e in day.iter_entries():
            where = f"{day.date} {day.tracks[ti].title}: {e.title} {e.interval}"
            if not e.interval.within(config.window_start, config.window_end):
                violations_by_rule["outside_window"].append(where)
            if not (e.start.on_grid(step) and e.end.on_grid(step)):
                violations_by_rule["off_grid"].append(where)

    # Placement/unassignment exclusivity
    placements: Counter = Counter()
    for day in schedule_set.days:
        for _, e in day.iter_entries():
            if e.proposal is not None:
                placements[e.proposal.id] += 1
    for pid, c in placements.items():
        if c > 1:
            violations_by_rule["duplicate_placement"].append(f"{pid} x{c}")
    pool = {p.id for p in schedule_set.unassigned}
    for pid in sorted(pool & set(placements)):
        violations_by_rule["placed_and_unassigned"].append(pid)
    for p in schedule_set.catalog:
        if p.id not in pool and p.id not in placements:
            violations_by_rule["missing_from_catalog_pool"].append(p.id)

    report["violations_by_rule"] = dict(violations_by_rule)

    talk_minutes: Dict[str, Dict[str, int]] = {}
    for day in schedule_set.days:
        talk_minutes[day.date] = {t.title: t.talk_minutes() for t in day.tracks}
    report["talk_minutes_by_track"] = talk_minutes
    report["unassigned_count"] = len(schedule_set.unassigned)
    return report
