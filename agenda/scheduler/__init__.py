from .moves import (
    EntryRef,
    MoveResult,
    Slot,
    add_track,
    can_swap,
    clamp_service_duration,
    create_service_session,
    duplicate_service_session,
    move_service_session,
    move_talk,
    remove_entry,
    remove_track,
    rename_service_session,
    resize_service_session,
    swap_talks,
    update_track,
)
from .slots import can_drop, find_available_slot, grid_slots

__all__ = [
    "EntryRef",
    "MoveResult",
    "Slot",
    "add_track",
    "can_drop",
    "can_swap",
    "clamp_service_duration",
    "create_service_session",
    "duplicate_service_session",
    "find_available_slot",
    "grid_slots",
    "move_service_session",
    "move_talk",
    "remove_entry",
    "remove_track",
    "rename_service_session",
    "resize_service_session",
    "swap_talks",
    "update_track",
]
