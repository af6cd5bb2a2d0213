"""Shared fixtures for vault import tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from dendron_importer.config import AppConfig, RuntimeConfig


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
    return root


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    runtime = RuntimeConfig(output_dir=tmp_path / "runs")
    return AppConfig(runtime=runtime)


@pytest.fixture
def make_tree(tmp_path: Path):
    def _make(files: dict[str, str | bytes], name: str = "vault") -> Path:
        return write_tree(tmp_path / name, files)

    return _make
