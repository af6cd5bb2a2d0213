from __future__ import annotations

import hashlib
import os
import shutil
import tempfile
import time
from pathlib import Path


def generate_run_id(prefix: str = "import") -> str:
    epoch_ms = int(time.time() * 1000)
    random_bits = hashlib.sha256(os.urandom(16)).hexdigest()[:8]
    return f"{prefix}-{epoch_ms}-{random_bits}"


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=path.parent, encoding=encoding, newline=""
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except OSError:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    _replace(tmp_path, path)


def atomic_copy(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(delete=False, dir=destination.parent) as tmp:
        tmp_path = Path(tmp.name)
    try:
        shutil.copyfile(source, tmp_path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    _replace(tmp_path, destination)


def _replace(tmp_path: Path, destination: Path) -> None:
    try:
        os.replace(tmp_path, destination)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def is_hidden(name: str, prefix: str = ".") -> bool:
    return name.startswith(prefix)


def has_extension(name: str, extensions: tuple[str, ...]) -> bool:
    return Path(name).suffix.lower() in extensions
