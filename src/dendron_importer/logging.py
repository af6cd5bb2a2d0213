from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from io import StringIO
from pathlib import Path
from typing import Any

from .models import RunStats
from .utils import atomic_write

SUMMARY_HEADER = [
    "run_id",
    "started_at",
    "duration_s",
    "total",
    "processed",
    "skipped",
    "errors",
    "cancelled",
    "stage",
]


@dataclass(slots=True)
class RunLogEntry:
    run_id: str
    source: str
    target: str
    kind: str
    status: str
    error: str | None
    elapsed_ms: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RunLogger:
    def __init__(self, log_file: Path | None) -> None:
        self._log_file = log_file

    def append(self, entry: RunLogEntry) -> None:
        if self._log_file is None:
            return
        self._log_file.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self._log_file.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")


def summary_row(stats: RunStats) -> list[str]:
    return [
        stats.run_id,
        stats.start_time.strftime("%Y-%m-%dT%H:%M:%SZ"),
        f"{stats.duration_seconds:.2f}",
        str(stats.total_files),
        str(stats.processed_files),
        str(stats.skipped_files),
        str(len(stats.errors)),
        str(stats.cancelled).lower(),
        stats.stage.value,
    ]


def append_summary_csv(path: Path, stats: RunStats) -> None:
    header = SUMMARY_HEADER
    rows: list[list[str]] = []
    if path.exists():
        with path.open("r", encoding="utf-8", newline="") as handle:
            existing = list(csv.reader(handle))
        if existing:
            header, rows = existing[0], existing[1:]
    rows.append(summary_row(stats))
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    writer.writerows(rows)
    atomic_write(path, buffer.getvalue())
