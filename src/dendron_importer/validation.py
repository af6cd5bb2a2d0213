"""Cheap checks that a directory looks like an Obsidian vault."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .models import ValidationResult, VaultStats
from .utils import is_hidden

logger = logging.getLogger(__name__)

VAULT_MARKER = ".obsidian"


def has_vault_config(root: Path, marker: str = VAULT_MARKER) -> bool:
    return (Path(root) / marker).is_dir()


def has_markdown_files(root: Path, max_depth: int = 2, extension: str = ".md") -> bool:
    """Look for a markdown file in ``root`` and up to ``max_depth`` levels below it."""
    pending: list[tuple[Path, int]] = [(Path(root), 0)]
    while pending:
        directory, depth = pending.pop()
        try:
            with os.scandir(directory) as listing:
                items = list(listing)
        except OSError:
            continue
        subdirs: list[Path] = []
        for item in items:
            if item.is_file(follow_symlinks=False) and item.name.endswith(extension):
                return True
            if item.is_dir(follow_symlinks=False) and not is_hidden(item.name):
                subdirs.append(Path(item.path))
        if depth < max_depth:
            pending.extend((subdir, depth + 1) for subdir in subdirs)
    return False


def analyze_vault(root: Path, marker: str = VAULT_MARKER, extension: str = ".md") -> VaultStats:
    markdown_files = 0
    folders = 0
    total_files = 0
    pending = [Path(root)]
    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as listing:
                items = list(listing)
        except OSError as exc:
            logger.warning("Error analyzing directory %s: %s", directory, exc)
            continue
        for item in items:
            if is_hidden(item.name):
                continue
            if item.is_dir(follow_symlinks=False):
                folders += 1
                pending.append(Path(item.path))
            elif item.is_file(follow_symlinks=False):
                total_files += 1
                if item.name.endswith(extension):
                    markdown_files += 1
    return VaultStats(
        markdown_files=markdown_files,
        folders=folders,
        total_files=total_files,
        has_vault_config=has_vault_config(root, marker),
    )


def validate_source_vault(
    root: Path,
    *,
    marker: str = VAULT_MARKER,
    max_depth: int = 2,
    extension: str = ".md",
) -> ValidationResult:
    root = Path(root)
    stats = analyze_vault(root, marker, extension)
    looks_valid = stats.has_vault_config or has_markdown_files(root, max_depth, extension)
    return ValidationResult(path=root, is_likely_valid=looks_valid, stats=stats)


__all__ = [
    "VAULT_MARKER",
    "analyze_vault",
    "has_markdown_files",
    "has_vault_config",
    "validate_source_vault",
]
