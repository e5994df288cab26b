# Re-export common types
from .items import Format, Proposal, SchedulableItem, ServiceSession, Status, Talk
from .period import FormatError, Interval, TimeOfDay
from .schedule import ConferenceScheduleSet, DaySchedule, ScheduledEntry, Track

__all__ = [
    "TimeOfDay",
    "Interval",
    "FormatError",
    "Format",
    "Status",
    "Proposal",
    "Talk",
    "ServiceSession",
    "SchedulableItem",
    "ScheduledEntry",
    "Track",
    "DaySchedule",
    "ConferenceScheduleSet",
]
