from __future__ import annotations

import re
from dataclasses import dataclass

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


class FormatError(ValueError):
    """Raised for malformed wall-clock strings."""


@dataclass(frozen=True, order=True)
class TimeOfDay:
    minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.minutes <= MINUTES_PER_DAY:
            raise ValueError(f"time outside a single day: {self.minutes} minutes")

    @classmethod
    def parse(cls, text: str) -> "TimeOfDay":
        if not isinstance(text, str):
            raise FormatError(f"expected HH:MM string, got {type(text).__name__}")
        m = _HHMM.match(text.strip())
        if m is None:
            raise FormatError(f"malformed time {text!r} (expected HH:MM)")
        hours, mins = int(m.group(1)), int(m.group(2))
        # 24:00 is accepted as the end of the day so every value parses back
        if (hours, mins) == (24, 0):
            return cls(MINUTES_PER_DAY)
        if hours > 23 or mins > 59:
            raise FormatError(f"time out of range: {text!r}")
        return cls(hours * 60 + mins)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def plus(self, minutes: int) -> "TimeOfDay":
        # No rollover: TimeOfDay.__post_init__ rejects anything past midnight
        return TimeOfDay(self.minutes + int(minutes))

    def minutes_until(self, other: "TimeOfDay") -> int:
        return other.minutes - self.minutes

    def on_grid(self, step: int) -> bool:
        return self.minutes % step == 0

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def parse_time(text: str) -> TimeOfDay:
    return TimeOfDay.parse(text)


def format_time(t: TimeOfDay) -> str:
    return str(t)


def add_minutes(t: TimeOfDay, minutes: int) -> TimeOfDay:
    return t.plus(minutes)


def duration_between(start: TimeOfDay, end: TimeOfDay) -> int:
    return start.minutes_until(end)


@dataclass(frozen=True)
class Interval:
    """Half-open ``[start, end)`` span of wall-clock time.

    Touching endpoints do not conflict: 09:00-09:45 and 09:45-10:00 can
    share a track.
    """

    start: TimeOfDay
    end: TimeOfDay

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(f"interval end {self.end} must be after start {self.start}")

    @classmethod
    def at(cls, start: TimeOfDay, duration: int) -> "Interval":
        return cls(start, start.plus(duration))

    @classmethod
    def parse(cls, start: str, end: str) -> "Interval":
        return cls(TimeOfDay.parse(start), TimeOfDay.parse(end))

    @property
    def duration(self) -> int:
        return self.start.minutes_until(self.end)

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end

    def within(self, lo: TimeOfDay, hi: TimeOfDay) -> bool:
        return lo <= self.start and self.end <= hi

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def overlaps(a: Interval, b: Interval) -> bool:
    return a.overlaps(b)
