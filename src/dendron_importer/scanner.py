"""Depth-first enumeration of a vault directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from .config import DEFAULT_IGNORED_DIRS
from .models import FileEntry
from .utils import is_hidden

logger = logging.getLogger(__name__)


class ScanError(RuntimeError):
    """Raised when the scan root itself cannot be listed."""


class TreeScanner:
    """Walks ``root`` and yields every visible entry below it.

    Directories are yielded before their contents and siblings come out in
    name order. Hidden entries and directories listed in ``ignored_dirs``
    are skipped together with everything beneath them. A sub-directory that
    cannot be listed is reported in ``warnings`` and its subtree is left
    out; only a failure to list ``root`` raises :class:`ScanError`.
    """

    def __init__(
        self,
        root: Path,
        *,
        ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS,
        hidden_prefix: str = ".",
    ) -> None:
        self.root = Path(root)
        self.ignored_dirs = frozenset(ignored_dirs)
        self.hidden_prefix = hidden_prefix
        self.warnings: list[str] = []

    def scan(self) -> Iterator[FileEntry]:
        try:
            children = self._list(self.root, "")
        except OSError as exc:
            raise ScanError(f"Cannot read source directory {self.root}: {exc}") from exc

        stack: list[FileEntry] = list(reversed(children))
        while stack:
            entry = stack.pop()
            yield entry
            if not entry.is_directory:
                continue
            try:
                nested = self._list(entry.location, entry.relative_path)
            except OSError as exc:
                message = f"Error scanning directory {entry.relative_path}: {exc}"
                logger.warning(message)
                self.warnings.append(message)
                continue
            stack.extend(reversed(nested))

    def _list(self, directory: Path, base: str) -> list[FileEntry]:
        entries: list[FileEntry] = []
        with os.scandir(directory) as listing:
            items = sorted(listing, key=lambda item: item.name)
        for item in items:
            if is_hidden(item.name, self.hidden_prefix):
                continue
            relative_path = f"{base}/{item.name}" if base else item.name
            if item.is_dir(follow_symlinks=False):
                if item.name in self.ignored_dirs:
                    continue
                entries.append(FileEntry(Path(item.path), item.name, relative_path, True))
            elif item.is_file(follow_symlinks=False):
                entries.append(FileEntry(Path(item.path), item.name, relative_path, False))
        return entries


def scan_tree(root: Path, *, ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS) -> list[FileEntry]:
    return list(TreeScanner(root, ignored_dirs=ignored_dirs).scan())


__all__ = ["ScanError", "TreeScanner", "scan_tree"]
