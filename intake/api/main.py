from __future__ import annotations

"""
HTTP surface for the intake draft backend.

Design intent:
- Keep handlers thin: each maps one request to one DraftService call.
- Build the store once in the lifespan and inject it; tests pre-seed
  `app.state.draft_service` to skip the database entirely.
- Never leak storage error text unless explicitly configured to.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from intake.drafts.service import DraftNotFoundError, DraftService
from intake.internal_core.config import ConfigurationError, IntakeConfig, load_config
from intake.internal_core.contracts import (
    DraftOut,
    HelloResponse,
    NewDraftResponse,
    PatchDraftRequest,
)
from intake.internal_core.store import (
    DraftStore,
    InMemoryDraftStore,
    MongoDraftStore,
    StorageError,
)

logger = logging.getLogger(__name__)

DRAFT_UPDATE_HEADER = "X-Draft-Update"


def build_store(config: IntakeConfig) -> DraftStore:
    if config.INTAKE_STORE_BACKEND == "memory":
        return InMemoryDraftStore()
    return MongoDraftStore.from_config(config)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    owned_store: DraftStore | None = None
    if getattr(app.state, "draft_service", None) is None:
        # ConfigurationError propagates and aborts startup.
        config = load_config()
        owned_store = build_store(config)
        await owned_store.ensure_indexes()
        app.state.intake_config = config
        app.state.draft_service = DraftService(owned_store, public_base=config.PUBLIC_BASE)
        logger.info(
            "draft_store_ready store=%s db=%s collection=%s",
            owned_store.name(),
            config.DB_NAME,
            config.INTAKE_COLLECTION,
        )
    try:
        yield
    finally:
        if owned_store is not None:
            await owned_store.close()
            app.state.draft_service = None


def _startup_config() -> IntakeConfig | None:
    try:
        return load_config()
    except ConfigurationError:
        # Middleware still needs defaults; the lifespan re-raises on startup.
        return None


_BOOT_CONFIG = _startup_config()
_CORS_ORIGINS = list(_BOOT_CONFIG.INTAKE_CORS_ORIGINS) if _BOOT_CONFIG else ["*"]
_STATIC_DIR = (
    _BOOT_CONFIG.static_dir_path() if _BOOT_CONFIG else Path(__file__).resolve().parents[2] / "www"
)

app = FastAPI(title="intake draft service", lifespan=_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_draft_service() -> DraftService:
    service = getattr(app.state, "draft_service", None)
    if isinstance(service, DraftService):
        return service
    raise HTTPException(status_code=503, detail="Draft store is not initialized.")


def _expose_error_detail() -> bool:
    config = getattr(app.state, "intake_config", None)
    return bool(config is not None and config.INTAKE_EXPOSE_ERROR_DETAIL)


def _static_dir() -> Path:
    override = getattr(app.state, "static_dir", None)
    return Path(override) if override else _STATIC_DIR


def _storage_failure(exc: StorageError, action: str) -> HTTPException:
    logger.exception("draft_storage_failed action=%s code=%s store=%s", action, exc.code, exc.store_name)
    detail = f"Storage failure: {exc.message}" if _expose_error_detail() else "Storage failure."
    return HTTPException(status_code=500, detail=detail)


@app.get("/api/hello/{name}", response_model=HelloResponse)
async def hello(name: str) -> HelloResponse:
    return HelloResponse(hello=f"Hello {name}")


@app.get("/api/health", response_class=PlainTextResponse)
async def health() -> str:
    return "ok"


@app.post("/api/drafts", response_model=NewDraftResponse)
async def create_draft() -> NewDraftResponse:
    service = _get_draft_service()
    try:
        return await service.create()
    except StorageError as exc:
        raise _storage_failure(exc, "create") from exc


@app.get("/api/drafts/{draft_id}", response_model=DraftOut)
async def get_draft(draft_id: str) -> DraftOut:
    service = _get_draft_service()
    try:
        return await service.get(draft_id)
    except DraftNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Draft not found.") from exc
    except StorageError as exc:
        raise _storage_failure(exc, "get") from exc


@app.patch("/api/drafts/{draft_id}", response_model=DraftOut)
async def patch_draft(draft_id: str, payload: PatchDraftRequest, response: Response) -> DraftOut:
    service = _get_draft_service()
    try:
        result = await service.patch(draft_id, payload.data, payload.step)
    except DraftNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Draft not found.") from exc
    except StorageError as exc:
        raise _storage_failure(exc, "patch") from exc
    response.headers[DRAFT_UPDATE_HEADER] = "applied" if result.applied else "ignored"
    return result.draft


@app.post("/api/drafts/{draft_id}/submit", response_model=DraftOut)
async def submit_draft(draft_id: str) -> DraftOut:
    service = _get_draft_service()
    try:
        return await service.submit(draft_id)
    except DraftNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Draft not found.") from exc
    except StorageError as exc:
        raise _storage_failure(exc, "submit") from exc


@app.get("/favicon.ico", include_in_schema=False)
async def favicon() -> FileResponse:
    path = _static_dir() / "favicon.ico"
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not found.")
    return FileResponse(str(path), media_type="image/x-icon")


if _STATIC_DIR.is_dir():
    app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")


@app.get("/{full_path:path}", include_in_schema=False)
async def frontend_entry(full_path: str) -> FileResponse:
    # Unknown API routes must not fall through to the SPA shell.
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not found.")
    index_path = _static_dir() / "index.html"
    if not index_path.is_file():
        raise HTTPException(status_code=404, detail="Not found.")
    return FileResponse(str(index_path), media_type="text/html")
