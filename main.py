"""ASGI entry point, e.g. ``uvicorn main:app``."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from dendron_importer.api import create_app
from dendron_importer.settings import ENV_PREFIX


def _disabled_app(reason: str) -> FastAPI:
    fallback = FastAPI(title="Obsidian to Dendron Importer (disabled)", version="0.1.0")

    @fallback.api_route("/{path:path}", methods=["GET", "POST"])
    async def api_disabled(path: str) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={
                "detail": reason,
                "hint": f"set [runtime] enable_local_api = true or {ENV_PREFIX}ENABLE_LOCAL_API=1",
            },
        )

    return fallback


try:
    app = create_app()
except RuntimeError as exc:
    app = _disabled_app(str(exc))
