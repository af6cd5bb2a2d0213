from __future__ import annotations

from pathlib import Path

from .config import DEFAULT_ASSET_EXTENSIONS
from .models import FileEntry
from .utils import atomic_copy, has_extension

ASSETS_DIRNAME = "assets"


def is_asset(name: str, extensions: tuple[str, ...] = DEFAULT_ASSET_EXTENSIONS) -> bool:
    return has_extension(name, extensions)


def asset_destination(entry: FileEntry, target_root: Path) -> Path:
    assets_dir = Path(target_root) / ASSETS_DIRNAME
    if "/" in entry.relative_path:
        return assets_dir.joinpath(*entry.relative_path.split("/"))
    return assets_dir / entry.name


def relocate_asset(entry: FileEntry, target_root: Path) -> Path:
    """Copy an asset byte-for-byte into ``<target>/assets``."""
    destination = asset_destination(entry, target_root)
    atomic_copy(entry.location, destination)
    return destination


__all__ = ["ASSETS_DIRNAME", "asset_destination", "is_asset", "relocate_asset"]
