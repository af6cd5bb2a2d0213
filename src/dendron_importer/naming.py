"""Dendron hierarchy names for vault paths and wiki link targets.

``Projects/Web/My Notes.md`` becomes ``projects.web.my-notes.md`` as a file
name, while a link to ``Projects/Web/My Notes`` becomes
``projects.web.my.notes``. Whitespace maps to ``-`` in stored file names and
to ``.`` in link targets.
"""

from __future__ import annotations

import re

HIERARCHY_RE = re.compile(r"[a-z0-9.\-]*")

_SEPARATOR_RE = re.compile(r"[/\\]")
_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9.\-]")


def _normalize(value: str, whitespace: str) -> str:
    value = value.lower()
    value = _SEPARATOR_RE.sub(".", value)
    value = _WHITESPACE_RE.sub(whitespace, value)
    return _DISALLOWED_RE.sub("", value)


def path_to_hierarchy(relative_path: str) -> str:
    return _normalize(relative_path, "-")


def link_to_hierarchy(target: str) -> str:
    return _normalize(target.strip(), ".")


def strip_extension(relative_path: str, extension: str = ".md") -> str:
    if extension and relative_path.lower().endswith(extension.lower()):
        return relative_path[: -len(extension)]
    return relative_path


def extract_parent_hierarchy(relative_path: str, extension: str = ".md") -> str | None:
    """Return the hierarchy a note lives under, or ``None`` for root notes."""
    parts = path_to_hierarchy(strip_extension(relative_path, extension)).split(".")
    if len(parts) < 2:
        return None
    return ".".join(parts[:-1])


def target_filename(relative_path: str, convert_hierarchy: bool) -> str:
    if convert_hierarchy:
        return path_to_hierarchy(relative_path)
    return relative_path.rsplit("/", 1)[-1]


def is_hierarchy_identifier(value: str) -> bool:
    return HIERARCHY_RE.fullmatch(value) is not None


__all__ = [
    "HIERARCHY_RE",
    "extract_parent_hierarchy",
    "is_hierarchy_identifier",
    "link_to_hierarchy",
    "path_to_hierarchy",
    "strip_extension",
    "target_filename",
]
