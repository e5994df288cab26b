from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping

from ..models.items import Proposal, ServiceSession
from ..models.period import TimeOfDay
from ..scheduler.moves import EntryRef, Slot
from .editor import EditSession

Command = Mapping[str, Any]


def _time(cmd: Command, key: str) -> TimeOfDay:
    return TimeOfDay.parse(str(cmd[key]))


def _source(cmd: Command) -> EntryRef | None:
    if "from_track" not in cmd:
        return None
    return EntryRef(int(cmd["from_track"]), _time(cmd, "from_start"))


def _target(cmd: Command) -> Slot:
    return Slot(int(cmd["track"]), _time(cmd, "start"))


def _proposal(cmd: Command, proposals: Mapping[str, Proposal]) -> Proposal:
    ref = str(cmd["proposal"])
    p = proposals.get(ref)
    if p is None:
        raise ValueError(f"unknown proposal {ref!r}")
    return p


def _move_talk(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.drop_talk(_proposal(cmd, proposals), _target(cmd), _source(cmd)).success


def _move_service(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    session = ServiceSession(str(cmd["label"]), int(cmd.get("duration", s.config.default_service_minutes)))
    return s.move_service_session(session, _target(cmd), _source(cmd)).success


def _create_service(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.create_service_session(int(cmd["track"]), _time(cmd, "start"), str(cmd["label"]), cmd.get("duration")).success


def _resize_service(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.resize_service_session(int(cmd["track"]), int(cmd["entry"]), float(cmd["duration"])).success


def _rename_service(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.rename_service_session(int(cmd["track"]), int(cmd["entry"]), str(cmd["label"])).success


def _remove_entry(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.remove_entry(int(cmd["track"]), int(cmd["entry"])).success


def _duplicate_service(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.duplicate_service_session(int(cmd["track"]), int(cmd["entry"])).success


def _add_track(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.add_track(str(cmd.get("title", "")), str(cmd.get("description", ""))).success


def _remove_track(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.remove_track(int(cmd["track"])).success


def _update_track(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.update_track(int(cmd["track"]), str(cmd.get("title", "")), str(cmd.get("description", ""))).success


def _select_day(s: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    return s.select_day(int(cmd["day"]))


HANDLERS: Dict[str, Callable[[EditSession, Command, Mapping[str, Proposal]], bool]] = {
    "select_day": _select_day,
    "move_talk": _move_talk,
    "move_service": _move_service,
    "create_service": _create_service,
    "resize_service": _resize_service,
    "rename_service": _rename_service,
    "remove_entry": _remove_entry,
    "duplicate_service": _duplicate_service,
    "add_track": _add_track,
    "remove_track": _remove_track,
    "update_track": _update_track,
}


def apply_command(session: EditSession, cmd: Command, proposals: Mapping[str, Proposal]) -> bool:
    op = str(cmd.get("op", "")).strip()
    handler = HANDLERS.get(op)
    if handler is None:
        raise ValueError(f"Unknown op: {op!r}")
    return handler(session, cmd, proposals)


def apply_script(
    session: EditSession, commands: Iterable[Command], proposals: Mapping[str, Proposal]
) -> List[bool]:
    return [apply_command(session, cmd, proposals) for cmd in commands]
