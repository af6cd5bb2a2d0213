import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dendron_importer.api import create_app
from dendron_importer.config import AppConfig, RuntimeConfig
from dendron_importer.executors import run_sync


def _client(tmp_path: Path) -> TestClient:
    config = AppConfig(runtime=RuntimeConfig(output_dir=tmp_path / "runs", enable_local_api=True))
    return TestClient(create_app(config))


def test_disabled_api_refuses_to_start(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        create_app(AppConfig(runtime=RuntimeConfig(output_dir=tmp_path)))


def test_health(tmp_path: Path) -> None:
    response = _client(tmp_path).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_validate_endpoint(tmp_path: Path, make_tree) -> None:
    source = make_tree({"a.md": "a"})
    response = _client(tmp_path).post("/validate", json={"path": str(source)})
    assert response.status_code == 200
    body = response.json()
    assert body["is_likely_valid"] is True
    assert body["stats"]["markdown_files"] == 1


def test_import_endpoint(tmp_path: Path, make_tree) -> None:
    source = make_tree({"Projects/Web/notes.md": "[[Other Page]]"})
    target = tmp_path / "dendron"
    response = _client(tmp_path).post(
        "/import",
        json={"source": str(source), "target": str(target), "options": {"handle_assets": False}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["processed_files"] == 1
    assert body["stage"] == "done"
    assert (target / "projects.web.notes.md").read_text(encoding="utf-8") == "[[other.page]]"


def test_import_endpoint_fatal(tmp_path: Path) -> None:
    source = tmp_path / "empty"
    source.mkdir()
    response = _client(tmp_path).post("/import", json={"source": str(source), "target": str(tmp_path / "out")})
    assert response.status_code == 400
    assert response.json()["detail"] == "NOTHING_TO_IMPORT"


def test_run_sync_returns_result() -> None:
    assert asyncio.run(run_sync(sum, [1, 2, 3])) == 6
