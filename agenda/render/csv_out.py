from __future__ import annotations

import csv
import io
from pathlib import Path

from ..models.items import Talk
from ..models.schedule import ConferenceScheduleSet

HEADER = ["Date", "Track", "Start", "End", "Kind", "Title", "Status"]


def csv_blocks(schedule_set: ConferenceScheduleSet) -> str:
    # One block per day, tracks in order, entries by start time
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    for day in schedule_set.days:
        w.writerow(HEADER)
        for t in day.tracks:
            for e in t.by_start():
                if isinstance(e.item, Talk):
                    w.writerow([day.date, t.title, e.start, e.end, "talk", e.title, e.item.proposal.status.value])
                else:
                    w.writerow([day.date, t.title, e.start, e.end, "service", e.title, ""])
        buf.write("\n")  # blank line
    return buf.getvalue()


def write_csv_blocks(text: str, outputs_dir: Path) -> None:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    with (outputs_dir / "program.csv").open("w", encoding="utf-8", newline="") as f:
        f.write(text)
