from __future__ import annotations

import logging
import time

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings
from .routers import export, health, presentations, spa, templates, uploads
from .services.template_service import TemplateCatalog
from .state import AppState
from .store import JsonFilePresentationStore, PresentationStore

logger = logging.getLogger("pp.main")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Settings | None = None,
    store: PresentationStore | None = None,
    templates_catalog: TemplateCatalog | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    settings.ensure_dirs()

    app = FastAPI(title="pitchperfect-backend")
    app.state.pp = AppState(
        settings=settings,
        store=store or JsonFilePresentationStore(settings.presentations_dir),
        templates=templates_catalog or TemplateCatalog.from_file(),
        http_transport=http_transport,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Disposition", "X-Media-Included", "X-Media-Missing"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        t0 = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - t0) * 1000.0
        logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, ms)
        return response

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error in %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc) or exc.__class__.__name__})

    app.include_router(health.router)
    app.include_router(templates.router)
    app.include_router(uploads.router)
    app.include_router(presentations.router)
    app.include_router(export.router)
    app.mount("/uploads", StaticFiles(directory=str(settings.upload_dir)), name="uploads")
    # Must stay last: catches every remaining GET path.
    app.include_router(spa.router)
    return app

