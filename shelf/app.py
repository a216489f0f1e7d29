"""FastAPI server for Shelf.

Exposes:
- GET /api/comics                            (reconcile, then list all records)
- GET /api/comic/{comic_id}                  (single record)
- GET /api/comic/{comic_id}/page/{page_number}  (raw page image, 0-based)
- GET /covers/{file}                         (static cover images)
"""

from __future__ import annotations

import asyncio
import os
import re
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import ShelfConfig
from .covers import COVERS_URL_PREFIX
from .errors import ArchiveMissing, ArchiveUnreadable, ComicNotFound, InvalidPageIndex
from .index import ComicIndex
from .logging_config import get_logger
from .models import ComicRecord
from .pages import PageService
from .scanner import LibraryScanner

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["comics"])

_PAGE_NUMBER = re.compile(r"-?[0-9]+")


@router.get("/comics", response_model=List[ComicRecord])
def list_comics(request: Request):
    """Reconcile the library directory, then return every record."""
    scanner: LibraryScanner = request.app.state.scanner
    try:
        stats = scanner.reconcile()
    except FileNotFoundError as exc:
        logger.error(f"Reconcile skipped: {exc}")
    else:
        if stats["added"]:
            logger.info(f"Indexed {stats['added']} new comics")
    return list(request.app.state.index.records())


@router.get("/comic/{comic_id}", response_model=ComicRecord)
def comic_info(comic_id: str, request: Request):
    comic = request.app.state.index.find_by_id(comic_id)
    if comic is None:
        raise HTTPException(status_code=404, detail="Comic not found")
    return comic


@router.get("/comic/{comic_id}/page/{page_number}")
def comic_page(comic_id: str, page_number: str, request: Request) -> Response:
    """Image bytes for one page (0-based)."""
    if not _PAGE_NUMBER.fullmatch(page_number):
        raise HTTPException(status_code=400, detail="Invalid page number")
    page_index = int(page_number)

    pages: PageService = request.app.state.pages
    try:
        page = pages.get_page(comic_id, page_index)
    except ComicNotFound:
        raise HTTPException(status_code=404, detail="Comic not found")
    except ArchiveMissing:
        raise HTTPException(status_code=404, detail="File not found")
    except InvalidPageIndex:
        raise HTTPException(status_code=400, detail="Invalid page number")
    except ArchiveUnreadable as exc:
        logger.error(f"Failed to read page {page_index} of {comic_id}: {exc}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return Response(content=page.data, media_type=page.content_type)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    async def _print_startup_messages():
        await asyncio.sleep(0.1)
        logger.info(f"Started server process [{os.getpid()}]")
        url = getattr(app.state, "public_url", None)
        if url:
            logger.info(f"Server running on {url}")

    asyncio.create_task(_print_startup_messages())
    yield


def create_app(config: ShelfConfig, index: ComicIndex) -> FastAPI:
    """Build the application around an already loaded index."""
    app = FastAPI(title="Shelf", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.index = index
    app.state.scanner = LibraryScanner(index, config)
    app.state.pages = PageService(index)

    app.include_router(router)

    config.covers_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        COVERS_URL_PREFIX,
        StaticFiles(directory=str(config.covers_dir)),
        name="covers",
    )
    return app


def run_server(
    app: FastAPI,
    config: ShelfConfig,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> None:
    """Run the FastAPI app with Uvicorn."""
    import uvicorn

    effective_host = host or config.server_host
    effective_port = port or config.server_port
    app.state.public_url = f"http://localhost:{effective_port}"

    uvicorn.run(
        app,
        host=effective_host,
        port=effective_port,
        log_level="info",
        log_config=None,
    )
