from __future__ import annotations

from agenda.config import DEFAULT_CONFIG, EditorConfig
from agenda.models import Format, Interval, Proposal, ScheduledEntry, ServiceSession, Talk, TimeOfDay, Track
from agenda.scheduler.slots import can_drop, find_available_slot, grid_slots


def t(s: str) -> TimeOfDay:
    return TimeOfDay.parse(s)


def talk(pid: str, fmt: Format) -> Talk:
    return Talk(Proposal(pid, f"Talk {pid}", fmt))


def entry(item, start: str, end: str) -> ScheduledEntry:
    return ScheduledEntry(item, Interval.parse(start, end))


def busy_track() -> Track:
    return Track(
        "Main",
        entries=(
            entry(talk("a", Format.presentation_45), "09:00", "09:45"),
            entry(talk("b", Format.presentation_25), "10:00", "10:25"),
        ),
    )


def test_free_start_is_returned_unchanged() -> None:
    item = talk("x", Format.lightning_10)
    assert find_available_slot(busy_track(), item, t("09:45")) == t("09:45")
    assert find_available_slot(Track("Empty"), item, t("13:00")) == t("13:00")


def test_conflict_searches_nearest_start() -> None:
    # 30 minutes at 09:30 overlaps 09:00-09:45 and the gap before 10:00 is too short;
    # free starts are 08:30 (60 min away) and 10:25 (55 min away)
    item = ServiceSession("Break", 30)
    found = find_available_slot(busy_track(), item, t("09:30"))
    assert found == t("10:25")


def test_equal_distance_prefers_earlier() -> None:
    # 5 min item at 10:00 in a track holding only 10:00-10:05:
    # 09:55 and 10:05 are both free and both 5 minutes away
    track = Track("T", entries=(entry(ServiceSession("Gap", 5), "10:00", "10:05"),))
    found = find_available_slot(track, ServiceSession("x", 5), t("10:00"))
    assert found == t("09:55")


def test_search_goes_later_when_earlier_is_blocked() -> None:
    track = Track(
        "T",
        entries=(
            entry(ServiceSession("Registration", 60), "08:00", "09:00"),
            entry(ServiceSession("Opening", 15), "09:00", "09:15"),
        ),
    )
    assert find_available_slot(track, ServiceSession("x", 10), t("08:30")) == t("09:15")


def test_none_available_when_window_is_full() -> None:
    cfg = EditorConfig(window_start=t("09:00"), window_end=t("10:00"))
    track = Track("T", entries=(entry(ServiceSession("Block", 50), "09:05", "09:55"),))
    assert find_available_slot(track, ServiceSession("x", 10), t("09:30"), config=cfg) is None
    assert find_available_slot(track, ServiceSession("x", 5), t("09:30"), config=cfg) in {t("09:00"), t("09:55")}


def test_item_longer_than_window_never_fits() -> None:
    cfg = EditorConfig(window_start=t("09:00"), window_end=t("10:00"))
    item = talk("w", Format.workshop_120)
    assert find_available_slot(Track("Empty"), item, t("09:00"), config=cfg) is None


def test_start_past_window_end_is_not_valid() -> None:
    item = talk("x", Format.presentation_45)
    assert not can_drop(Track("Empty"), item, t("20:30"))
    assert find_available_slot(Track("Empty"), item, t("20:30")) == t("20:15")


def test_self_exclusion_allows_shift_within_own_span() -> None:
    track = busy_track()
    own = track.entries[0]
    item = own.item
    assert not can_drop(track, item, t("09:10"))
    assert can_drop(track, item, t("09:10"), exclude=own)
    # Still blocked by the other entry
    assert not can_drop(track, item, t("09:30"), exclude=own)


def test_results_stay_in_window_and_conflict_free() -> None:
    track = busy_track()
    cfg = DEFAULT_CONFIG
    for desired in grid_slots(cfg):
        for item in (ServiceSession("s", 30), talk("x", Format.presentation_45), talk("w", Format.workshop_240)):
            found = find_available_slot(track, item, desired)
            if found is None:
                continue
            iv = Interval.at(found, item.duration)
            assert iv.within(cfg.window_start, cfg.window_end)
            assert not any(e.interval.overlaps(iv) for e in track.entries)


def test_off_grid_start_is_never_valid() -> None:
    item = talk("x", Format.lightning_10)
    track = Track("Empty")
    assert not can_drop(track, item, t("09:03"))
    assert find_available_slot(track, item, t("09:03")) is None
    assert find_available_slot(busy_track(), item, t("09:07")) is None


def test_grid_slots_cover_window() -> None:
    slots = grid_slots()
    assert slots[0] == t("08:00")
    assert slots[-1] == t("20:55")
    assert len(slots) == 13 * 12


def test_can_drop_does_not_touch_track() -> None:
    track = busy_track()
    before = track.entries
    for _ in range(3):
        can_drop(track, ServiceSession("x", 15), t("09:45"))
    assert track.entries is before
