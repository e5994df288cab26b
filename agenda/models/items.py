from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class Format(str, Enum):
    lightning_10 = "lightning_10"
    presentation_20 = "presentation_20"
    presentation_25 = "presentation_25"
    presentation_40 = "presentation_40"
    presentation_45 = "presentation_45"
    workshop_120 = "workshop_120"
    workshop_240 = "workshop_240"

    @property
    def minutes(self) -> int:
        # Duration is encoded in the suffix, e.g. presentation_45 -> 45
        return int(self.value.rsplit("_", 1)[1])


class Status(str, Enum):
    confirmed = "confirmed"
    accepted = "accepted"
    withdrawn = "withdrawn"
    rejected = "rejected"


@dataclass(frozen=True)
class Proposal:
    id: str
    title: str
    format: Format
    status: Status = Status.confirmed
    speakers: Tuple[str, ...] = ()

    @property
    def duration(self) -> int:
        return self.format.minutes


@dataclass(frozen=True)
class Talk:
    proposal: Proposal

    @property
    def duration(self) -> int:
        return self.proposal.duration

    @property
    def title(self) -> str:
        return self.proposal.title


@dataclass(frozen=True)
class ServiceSession:
    label: str
    duration: int

    @property
    def title(self) -> str:
        return self.label


SchedulableItem = Union[Talk, ServiceSession]
