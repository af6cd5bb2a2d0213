from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .config import AppConfig
from .core import ImportFailure, VaultImportService
from .executors import run_sync
from .models import TransformOptions
from .settings import get_settings, prepare_config
from .validation import validate_source_vault


class OptionsPayload(BaseModel):
    convert_hierarchy: bool = True
    preserve_metadata: bool = True
    convert_wiki_links: bool = True
    create_hierarchy_stubs: bool = False
    handle_assets: bool = True

    def to_options(self) -> TransformOptions:
        return TransformOptions(**self.model_dump())


class ImportRequest(BaseModel):
    source: Path
    target: Path
    options: OptionsPayload | None = None


class ValidateRequest(BaseModel):
    path: Path


class VaultStatsPayload(BaseModel):
    markdown_files: int
    folders: int
    total_files: int
    has_vault_config: bool


class ValidateResponse(BaseModel):
    path: str
    is_likely_valid: bool
    stats: VaultStatsPayload


class ImportResponse(BaseModel):
    run_id: str
    stage: str
    total_files: int
    processed_files: int
    skipped_files: int
    cancelled: bool
    duration_seconds: float
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    stubs_written: list[str] = Field(default_factory=list)


def create_app(config: AppConfig | None = None, *, require_enabled: bool = True) -> FastAPI:
    config = config or prepare_config(get_settings())
    if require_enabled and not config.runtime.enable_local_api:
        raise RuntimeError("Local API is disabled. Enable it via config.runtime.enable_local_api")
    service = VaultImportService(config)
    app = FastAPI(title="Obsidian to Dendron Importer", version="0.1.0")

    @app.get("/health", summary="Health check")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/validate", summary="Check that a folder looks like an Obsidian vault")
    async def validate(request: ValidateRequest) -> ValidateResponse:
        result = await run_sync(
            validate_source_vault,
            request.path,
            marker=config.vault.config_marker,
            max_depth=config.vault.validation_depth,
            extension=config.vault.markdown_extension,
        )
        return ValidateResponse(
            path=str(result.path),
            is_likely_valid=result.is_likely_valid,
            stats=VaultStatsPayload(
                markdown_files=result.stats.markdown_files,
                folders=result.stats.folders,
                total_files=result.stats.total_files,
                has_vault_config=result.stats.has_vault_config,
            ),
        )

    @app.post("/import", summary="Import a vault")
    async def import_vault(request: ImportRequest) -> ImportResponse:
        options = request.options.to_options() if request.options else config.importer.to_options()
        try:
            stats = await run_sync(service.transform_vault, request.source, request.target, options)
        except ImportFailure as exc:
            raise HTTPException(status_code=400, detail=exc.code) from exc
        return ImportResponse(
            run_id=stats.run_id,
            stage=stats.stage.value,
            total_files=stats.total_files,
            processed_files=stats.processed_files,
            skipped_files=stats.skipped_files,
            cancelled=stats.cancelled,
            duration_seconds=stats.duration_seconds,
            errors=stats.errors,
            warnings=stats.warnings,
            stubs_written=stats.stubs_written,
        )

    return app


__all__ = ["create_app"]
