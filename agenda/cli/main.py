from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from ..config import load_config
from ..data.loader import load_json, load_schedule_set
from ..data.store import JsonFileStore
from ..models.items import ServiceSession, Talk
from ..models.period import TimeOfDay
from ..render.csv_out import csv_blocks, write_csv_blocks
from ..scheduler.slots import find_available_slot
from ..session.commands import apply_script
from ..session.editor import EditSession
from ..validate.checks import validate_set
from ..validate.report import format_validation_report, write_validation_report


def _setup_logging(project_root: Path) -> None:
    logs_dir = project_root / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(logs_dir / "agenda.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


async def _save_days(session: EditSession, indices: List[int]) -> List[str]:
    failures: List[str] = []
    for i in indices:
        session.select_day(i)
        result = await session.save()
        if not result.ok:
            failures.append(f"{session.current.date}: {result.error}")
    return failures


def run_edit_script(
    project_root: Path,
    script_path: Path | None = None,
    *,
    save: bool = True,
    log_level: int | None = None,
) -> tuple[str, str]:
    """Replay an edit script through an edit session and save dirty days.

    Returns the formatted validation report and the session audit.
    """
    _setup_logging(project_root)
    if log_level is not None:
        logging.getLogger().setLevel(log_level)
    config = load_config(project_root)
    schedule_set, catalog = load_schedule_set(project_root)
    store = JsonFileStore(project_root, catalog.by_id())
    session = EditSession(schedule_set, store, config)

    if script_path is not None:
        commands = load_json(script_path)
        if isinstance(commands, dict):
            commands = commands.get("commands", [])
        apply_script(session, commands, catalog.by_id())

    failures: List[str] = []
    if save:
        dirty = session.dirty_days()
        failures = asyncio.run(_save_days(session, dirty))

    report = validate_set(session.schedule_set, config)
    outputs_dir = project_root / "outputs"
    write_validation_report(report, outputs_dir)
    audit_lines = ["Edits:"] + session.audit
    if failures:
        audit_lines += ["", "Save failures:"] + failures
    audit_text = "\n".join(audit_lines)
    with (outputs_dir / "audit.txt").open("w", encoding="utf-8") as f:
        f.write(audit_text)
    return format_validation_report(report), audit_text


app = typer.Typer(add_completion=False, help="Conference program schedule editor")


def _root() -> Path:
    return Path.cwd()


@app.command("validate")
def cli_validate(
    root: Optional[Path] = typer.Option(None, help="Project root (defaults to the working directory)"),
) -> None:
    project_root = root or _root()
    validation, _ = run_edit_script(project_root, None, save=False)
    print(validation)


@app.command("export-csv")
def cli_export_csv(
    root: Optional[Path] = typer.Option(None, help="Project root (defaults to the working directory)"),
) -> None:
    project_root = root or _root()
    _setup_logging(project_root)
    schedule_set, _ = load_schedule_set(project_root)
    csv = csv_blocks(schedule_set)
    write_csv_blocks(csv, project_root / "outputs")
    print(csv)


@app.command("find-slot")
def cli_find_slot(
    start: str = typer.Option(..., help="Desired start (HH:MM)"),
    day: int = typer.Option(0, help="Conference day index"),
    track: int = typer.Option(0, help="Track index"),
    proposal: Optional[str] = typer.Option(None, help="Proposal id to place"),
    duration: Optional[int] = typer.Option(None, help="Service session length in minutes"),
    root: Optional[Path] = typer.Option(None, help="Project root (defaults to the working directory)"),
) -> None:
    project_root = root or _root()
    _setup_logging(project_root)
    config = load_config(project_root)
    schedule_set, catalog = load_schedule_set(project_root)
    if not 0 <= day < len(schedule_set.days):
        raise typer.BadParameter(f"no conference day {day}")
    schedule = schedule_set.days[day]
    if not schedule.has_track(track):
        raise typer.BadParameter(f"no track {track} on {schedule.date}")
    if proposal is not None:
        p = catalog.get(proposal)
        if p is None:
            raise typer.BadParameter(f"unknown proposal {proposal}")
        item = Talk(p)
    elif duration is not None:
        item = ServiceSession("service", duration)
    else:
        raise typer.BadParameter("pass --proposal or --duration")
    found = find_available_slot(schedule.tracks[track], item, TimeOfDay.parse(start), config=config)
    print(str(found) if found is not None else "none available")


@app.command("apply")
def cli_apply(
    script: Path = typer.Argument(..., help="JSON edit script"),
    save: bool = typer.Option(True, "--save/--no-save", help="Save edited days"),
    log_level: str = typer.Option("INFO", help="Log level"),
    root: Optional[Path] = typer.Option(None, help="Project root (defaults to the working directory)"),
) -> None:
    project_root = root or _root()
    level = getattr(logging, log_level.upper(), logging.INFO)
    validation, audit = run_edit_script(project_root, script, save=save, log_level=level)
    print(validation)
    print(audit)


if __name__ == "__main__":  # pragma: no cover
    app()
