"""Dendron schema stubs for the hierarchies created by an import."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .naming import extract_parent_hierarchy
from .utils import atomic_write

STUB_TEMPLATE = """\
version: 1
imports: []
schemas:
  - id: {identifier}
    children:
      - pattern: "*"
        template:
          id: "{{{{fname}}}}"
          title: "{{{{title}}}}"
"""


@dataclass(slots=True)
class StubReport:
    written: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def collect_hierarchies(relative_paths: Iterable[str], extension: str = ".md") -> list[str]:
    """Distinct parent hierarchies in first-seen order."""
    seen: dict[str, None] = {}
    for relative_path in relative_paths:
        hierarchy = extract_parent_hierarchy(relative_path, extension)
        if hierarchy:
            seen.setdefault(hierarchy, None)
    return list(seen)


def render_stub(identifier: str) -> str:
    return STUB_TEMPLATE.format(identifier=identifier)


def stub_filename(identifier: str, extension: str = "yml") -> str:
    return f"{identifier}.schema.{extension}"


def write_stubs(
    relative_paths: Iterable[str],
    target_root: Path,
    *,
    extension: str = "yml",
    markdown_extension: str = ".md",
) -> StubReport:
    report = StubReport()
    for identifier in collect_hierarchies(relative_paths, markdown_extension):
        filename = stub_filename(identifier, extension)
        path = Path(target_root) / filename
        try:
            atomic_write(path, render_stub(identifier))
        except OSError as exc:
            report.errors.append(f"Failed to create schema file {filename}: {exc}")
            continue
        report.written.append(path)
    return report


__all__ = [
    "STUB_TEMPLATE",
    "StubReport",
    "collect_hierarchies",
    "render_stub",
    "stub_filename",
    "write_stubs",
]
