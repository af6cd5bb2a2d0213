from __future__ import annotations

import re

from .models import TransformOptions
from .naming import link_to_hierarchy

WIKI_LINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
# Leading block only; the closing delimiter must be a whole line.
FRONTMATTER_RE = re.compile(r"\A---\r?\n(?:---|.*?\r?\n---)(?:\r?\n|\Z)", re.DOTALL)


def rewrite_links(text: str, convert_hierarchy: bool) -> str:
    def _replace(match: re.Match[str]) -> str:
        link = match.group(1).strip()
        if convert_hierarchy:
            link = link_to_hierarchy(link)
        return f"[[{link}]]"

    return WIKI_LINK_RE.sub(_replace, text)


def has_metadata(text: str) -> bool:
    return FRONTMATTER_RE.match(text) is not None


def strip_metadata(text: str) -> str:
    return FRONTMATTER_RE.sub("", text, count=1)


def transform_note(text: str, options: TransformOptions) -> str:
    if options.convert_wiki_links:
        text = rewrite_links(text, options.convert_hierarchy)
    if not options.preserve_metadata:
        text = strip_metadata(text)
    return text


__all__ = [
    "FRONTMATTER_RE",
    "WIKI_LINK_RE",
    "has_metadata",
    "rewrite_links",
    "strip_metadata",
    "transform_note",
]
