"""Domain models for vault import runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A file or directory discovered under the scan root."""

    location: Path
    name: str
    relative_path: str
    is_directory: bool


@dataclass(frozen=True, slots=True)
class TransformOptions:
    """Switches for a single import run."""

    convert_hierarchy: bool = True
    preserve_metadata: bool = True
    convert_wiki_links: bool = True
    create_hierarchy_stubs: bool = False
    handle_assets: bool = True

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


class FileKind(str, Enum):
    MARKDOWN = "markdown"
    ASSET = "asset"
    STUB = "stub"


class RunStage(str, Enum):
    INIT = "init"
    SCANNING = "scanning"
    CONVERTING_MARKDOWN = "converting_markdown"
    CONVERTING_ASSETS = "converting_assets"
    WRITING_STUBS = "writing_stubs"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class ProcessingResult:
    original_path: str
    new_path: str
    kind: FileKind
    processed: bool
    error: str | None = None


@dataclass(slots=True)
class ProgressEvent:
    stage: RunStage
    message: str
    completed: int = 0
    total: int = 0

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 0.0
        return max(0.0, min(self.completed / self.total, 1.0))


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(slots=True)
class RunStats:
    """Counters and errors accumulated over one import run."""

    run_id: str
    total_files: int = 0
    processed_files: int = 0
    skipped_files: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    results: list[ProcessingResult] = field(default_factory=list)
    stubs_written: list[str] = field(default_factory=list)
    cancelled: bool = False
    stage: RunStage = RunStage.INIT
    start_time: datetime = field(default_factory=_utc_now)
    end_time: datetime | None = None

    def finalize(self) -> None:
        if self.end_time is None:
            self.end_time = _utc_now()
        self.skipped_files = self.total_files - self.processed_files

    @property
    def duration_seconds(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["stage"] = self.stage.value
        payload["start_time"] = self.start_time.isoformat()
        payload["end_time"] = self.end_time.isoformat() if self.end_time else None
        payload["duration_seconds"] = self.duration_seconds
        payload["results"] = [
            {**asdict(result), "kind": result.kind.value} for result in self.results
        ]
        return payload


@dataclass(frozen=True, slots=True)
class VaultStats:
    markdown_files: int = 0
    folders: int = 0
    total_files: int = 0
    has_vault_config: bool = False


@dataclass(frozen=True, slots=True)
class ValidationResult:
    path: Path
    is_likely_valid: bool
    stats: VaultStats

    def describe(self) -> str:
        return "\n".join(
            [
                "Vault Analysis:",
                f"Path: {self.path}",
                f"Markdown Files: {self.stats.markdown_files}",
                f"Folders: {self.stats.folders}",
                f"Total Files: {self.stats.total_files}",
                f"Obsidian Config: {'Found' if self.stats.has_vault_config else 'Not found'}",
            ]
        )


__all__ = [
    "FileEntry",
    "FileKind",
    "ProcessingResult",
    "ProgressCallback",
    "ProgressEvent",
    "RunStage",
    "RunStats",
    "TransformOptions",
    "ValidationResult",
    "VaultStats",
]
