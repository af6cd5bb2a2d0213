from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from threading import Event
from typing import Callable, Sequence

from .assets import asset_destination, is_asset, relocate_asset
from .config import AppConfig, load_config
from .content import transform_note
from .hierarchy import write_stubs
from .logging import RunLogEntry, RunLogger, append_summary_csv
from .models import (
    FileEntry,
    FileKind,
    ProcessingResult,
    ProgressCallback,
    ProgressEvent,
    RunStage,
    RunStats,
    TransformOptions,
)
from .naming import target_filename
from .scanner import ScanError, TreeScanner
from .utils import atomic_write, generate_run_id

logger = logging.getLogger(__name__)


class ImportFailure(RuntimeError):
    """A run-level failure. ``stats`` holds the finalized counters."""

    def __init__(self, code: str, message: str, stats: RunStats | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.stats = stats


@dataclass(slots=True)
class _RunContext:
    run_id: str
    source_root: Path
    target_root: Path
    options: TransformOptions
    logger: RunLogger
    callback: ProgressCallback
    cancellation: Event | None

    def cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.is_set()

    def report(self, stage: RunStage, message: str, completed: int = 0, total: int = 0) -> None:
        self.callback(ProgressEvent(stage=stage, message=message, completed=completed, total=total))


class VaultImportService:
    def __init__(self, config: AppConfig) -> None:
        self._config = config

    def transform_vault(
        self,
        source_root: Path,
        target_root: Path,
        options: TransformOptions | None = None,
        *,
        cancellation: Event | None = None,
        progress: ProgressCallback | None = None,
        run_id: str | None = None,
    ) -> RunStats:
        """Import every note and asset under ``source_root`` into ``target_root``.

        Per-file failures end up in ``RunStats.errors``. An unreadable source
        root or a source with nothing to import raises :class:`ImportFailure`.
        ``cancellation`` is checked before each file; files not reached are
        counted as skipped.
        """
        opts = options or self._config.importer.to_options()
        context = _RunContext(
            run_id=run_id or generate_run_id(),
            source_root=Path(source_root),
            target_root=Path(target_root),
            options=opts,
            logger=RunLogger(self._run_log_path()),
            callback=progress or (lambda _: None),
            cancellation=cancellation,
        )
        stats = RunStats(run_id=context.run_id)
        logger.info("Starting import %s: %s -> %s", stats.run_id, context.source_root, context.target_root)

        try:
            self._check_target(context, stats)
            entries = self._scan(context, stats)
            markdown_files, asset_files = self._classify(entries, opts)
            stats.total_files = len(markdown_files) + len(asset_files)
            if stats.total_files == 0:
                raise ImportFailure("NOTHING_TO_IMPORT", "No files found to import", stats)
            context.report(RunStage.SCANNING, f"Found {stats.total_files} files to process", 0, stats.total_files)

            processed_markdown = self._convert_markdown(markdown_files, context, stats)
            if opts.handle_assets and asset_files:
                self._convert_assets(asset_files, context, stats)
            if opts.create_hierarchy_stubs and not stats.cancelled:
                self._write_stubs(processed_markdown, context, stats)
            stats.stage = RunStage.FINALIZING
        except ImportFailure as exc:
            self._fail(stats, exc.code, str(exc))
            exc.stats = stats
            raise
        except Exception as exc:
            self._fail(stats, "UNEXPECTED", str(exc) or exc.__class__.__name__)
            raise
        finally:
            stats.finalize()
            self._record_summary(stats)

        stats.stage = RunStage.DONE
        context.report(RunStage.DONE, "Import completed!", stats.processed_files, stats.total_files)
        logger.info(
            "Import %s finished: %s/%s files processed, %s errors",
            stats.run_id,
            stats.processed_files,
            stats.total_files,
            len(stats.errors),
        )
        return stats

    def _check_target(self, context: _RunContext, stats: RunStats) -> None:
        if context.target_root.exists() and not context.target_root.is_dir():
            raise ImportFailure(
                "INVALID_TARGET", f"Target is not a directory: {context.target_root}", stats
            )

    def _scan(self, context: _RunContext, stats: RunStats) -> list[FileEntry]:
        stats.stage = RunStage.SCANNING
        context.report(RunStage.SCANNING, "Scanning source files...")
        scanner = TreeScanner(context.source_root, ignored_dirs=self._config.vault.ignored_dirs)
        try:
            entries = list(scanner.scan())
        except ScanError as exc:
            raise ImportFailure("SCAN_FAILED", str(exc), stats) from exc
        stats.warnings.extend(scanner.warnings)
        logger.debug("Scanned %s entries under %s", len(entries), context.source_root)
        return entries

    def _classify(
        self, entries: Sequence[FileEntry], options: TransformOptions
    ) -> tuple[list[FileEntry], list[FileEntry]]:
        files = [entry for entry in entries if not entry.is_directory]
        markdown_extension = self._config.vault.markdown_extension
        markdown = [entry for entry in files if entry.relative_path.endswith(markdown_extension)]
        assets: list[FileEntry] = []
        if options.handle_assets:
            extensions = self._config.vault.asset_extensions
            assets = [entry for entry in files if is_asset(entry.name, extensions)]
        return markdown, assets

    def _convert_markdown(
        self, entries: Sequence[FileEntry], context: _RunContext, stats: RunStats
    ) -> list[str]:
        stats.stage = RunStage.CONVERTING_MARKDOWN
        processed: list[str] = []

        def _write(entry: FileEntry) -> Path:
            destination = context.target_root / target_filename(
                entry.relative_path, context.options.convert_hierarchy
            )
            text = entry.location.read_bytes().decode("utf-8")
            atomic_write(destination, transform_note(text, context.options))
            return destination

        for index, entry in enumerate(entries, start=1):
            if context.cancelled():
                stats.cancelled = True
                break
            if self._process_one(entry, FileKind.MARKDOWN, _write, context, stats):
                processed.append(entry.relative_path)
            context.report(RunStage.CONVERTING_MARKDOWN, f"Processed {entry.name}", index, len(entries))
        return processed

    def _convert_assets(self, entries: Sequence[FileEntry], context: _RunContext, stats: RunStats) -> None:
        stats.stage = RunStage.CONVERTING_ASSETS
        context.report(RunStage.CONVERTING_ASSETS, "Processing assets...", 0, len(entries))
        for index, entry in enumerate(entries, start=1):
            if context.cancelled():
                stats.cancelled = True
                break
            self._process_one(
                entry,
                FileKind.ASSET,
                lambda item: relocate_asset(item, context.target_root),
                context,
                stats,
            )
            context.report(RunStage.CONVERTING_ASSETS, f"Processed {entry.name}", index, len(entries))

    def _process_one(
        self,
        entry: FileEntry,
        kind: FileKind,
        action: Callable[[FileEntry], Path],
        context: _RunContext,
        stats: RunStats,
    ) -> bool:
        started = time.perf_counter()
        try:
            destination = action(entry)
        except (OSError, ValueError) as exc:
            label = "asset " if kind is FileKind.ASSET else ""
            message = f"Failed to process {label}{entry.relative_path}: {exc}"
            logger.error(message)
            stats.errors.append(message)
            stats.results.append(
                ProcessingResult(
                    original_path=entry.relative_path,
                    new_path=self._planned_destination(entry, kind, context),
                    kind=kind,
                    processed=False,
                    error=str(exc),
                )
            )
            self._log_entry(context, entry.relative_path, "", kind, "failure", str(exc), started)
            return False

        stats.processed_files += 1
        new_path = destination.relative_to(context.target_root).as_posix()
        stats.results.append(
            ProcessingResult(original_path=entry.relative_path, new_path=new_path, kind=kind, processed=True)
        )
        self._log_entry(context, entry.relative_path, new_path, kind, "success", None, started)
        return True

    def _planned_destination(self, entry: FileEntry, kind: FileKind, context: _RunContext) -> str:
        if kind is FileKind.ASSET:
            return asset_destination(entry, context.target_root).relative_to(context.target_root).as_posix()
        return target_filename(entry.relative_path, context.options.convert_hierarchy)

    def _write_stubs(self, processed_markdown: Sequence[str], context: _RunContext, stats: RunStats) -> None:
        stats.stage = RunStage.WRITING_STUBS
        context.report(RunStage.WRITING_STUBS, "Creating schema files...")
        started = time.perf_counter()
        report = write_stubs(
            processed_markdown,
            context.target_root,
            extension=self._config.vault.stub_extension,
            markdown_extension=self._config.vault.markdown_extension,
        )
        for path in report.written:
            stats.stubs_written.append(path.name)
            self._log_entry(context, "", path.name, FileKind.STUB, "success", None, started)
        for message in report.errors:
            logger.error(message)
            stats.errors.append(message)
            self._log_entry(context, "", "", FileKind.STUB, "failure", message, started)

    def _fail(self, stats: RunStats, code: str, message: str) -> None:
        stats.stage = RunStage.FAILED
        stats.errors.append(message)
        logger.error("Import %s failed (%s): %s", stats.run_id, code, message)

    def _log_entry(
        self,
        context: _RunContext,
        source: str,
        target: str,
        kind: FileKind,
        status: str,
        error: str | None,
        started: float,
    ) -> None:
        entry = RunLogEntry(
            run_id=context.run_id,
            source=source,
            target=target,
            kind=kind.value,
            status=status,
            error=error,
            elapsed_ms=(time.perf_counter() - started) * 1000,
        )
        try:
            context.logger.append(entry)
        except OSError as exc:
            logger.warning("Could not append to run log %s: %s", self._run_log_path(), exc)

    def _run_log_path(self) -> Path:
        return self._config.runtime.output_dir / self._config.runtime.log_file

    def _record_summary(self, stats: RunStats) -> None:
        summary_path = self._config.runtime.output_dir / self._config.runtime.summary_csv
        try:
            append_summary_csv(summary_path, stats)
        except OSError as exc:
            logger.warning("Could not update run summary %s: %s", summary_path, exc)


def transform_vault(
    source_root: Path,
    target_root: Path,
    options: TransformOptions | None = None,
    *,
    cancellation: Event | None = None,
    progress: ProgressCallback | None = None,
    config: AppConfig | None = None,
) -> RunStats:
    service = VaultImportService(config or load_config())
    return service.transform_vault(
        source_root,
        target_root,
        options,
        cancellation=cancellation,
        progress=progress,
    )


__all__ = [
    "ImportFailure",
    "VaultImportService",
    "transform_vault",
]
