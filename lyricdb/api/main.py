import logging
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, Field

from lyricdb import __version__
from lyricdb.config.settings import CORS_ORIGINS, DEFAULT_DOWNLOAD_FORMAT
from lyricdb.exceptions import InvalidPlatform, LyricFileNotFound, SearchTimeout, SyncDisabled
from lyricdb.files.store import list_formats
from lyricdb.service import LyricService, build_service

logger = logging.getLogger(__name__)


class SearchRequest(BaseModel):
    query: str = ""
    platforms: Optional[List[str]] = None


class DownloadRequest(BaseModel):
    platform: str = ""
    music_id: str = Field("", alias="musicId")
    format: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(service: Optional[LyricService] = None) -> FastAPI:
    if service is None:
        service = build_service()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting lyric index API server...")
        service.start()
        yield
        service.stop()

    app = FastAPI(
        title="lyricdb",
        description="Metadata search over the AMLL TTML lyric dataset",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        client = request.client.host if request.client else "-"
        logger.info(
            "[%s] %s %s %.1fms",
            request.method,
            request.url.path,
            client,
            (time.perf_counter() - start) * 1000,
        )
        return response

    @app.exception_handler(SearchTimeout)
    async def search_timeout_handler(request: Request, exc: SearchTimeout):
        return _error(408, "Search timeout")

    @app.exception_handler(InvalidPlatform)
    async def invalid_platform_handler(request: Request, exc: InvalidPlatform):
        return _error(400, "Invalid platform")

    @app.exception_handler(LyricFileNotFound)
    async def not_found_handler(request: Request, exc: LyricFileNotFound):
        return _error(404, "Lyric file not found")

    @app.exception_handler(SyncDisabled)
    async def sync_disabled_handler(request: Request, exc: SyncDisabled):
        return _error(403, str(exc))

    @app.get("/api/status")
    def status():
        return service.status()

    @app.get("/api/formats")
    def formats():
        return list_formats()

    @app.get("/api/search")
    def search_get(
        query: str = Query("", description="Substring to look for"),
        platforms: Optional[List[str]] = Query(None, description="Platforms to search, all when omitted"),
    ):
        return service.engine.search(query, platforms).to_dict()

    @app.post("/api/search")
    def search_post(request: SearchRequest):
        return service.engine.search(request.query, request.platforms).to_dict()

    def _download(platform: str, music_id: str, fmt: Optional[str]):
        if not service.download_enabled:
            return _error(403, "Download API is disabled by server configuration")
        path = service.files.resolve(platform, music_id, fmt or DEFAULT_DOWNLOAD_FORMAT)
        return FileResponse(path, media_type="application/octet-stream", filename=path.name)

    @app.get("/api/download")
    def download_get(
        platform: str = "",
        music_id: str = Query("", alias="musicId"),
        format: Optional[str] = None,
    ):
        return _download(platform, music_id, format)

    @app.post("/api/download")
    def download_post(request: DownloadRequest):
        return _download(request.platform, request.music_id, request.format)

    def _update():
        changed = service.coordinator.trigger()
        if changed:
            return {"message": "Update successful and metadata reloaded", "changed": True}
        return {"message": "Already up to date", "changed": False}

    @app.get("/api/update")
    def update_get():
        return _update()

    @app.post("/api/update")
    def update_post():
        return _update()

    return app


def __getattr__(name: str):
    # `uvicorn lyricdb.api.main:app` gets an app built from settings on first
    # access; importing the module alone builds nothing
    if name == "app":
        app = create_app()
        globals()["app"] = app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
