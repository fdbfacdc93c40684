"""REST API for the Reflect knowledge base."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from .. import __version__
from .._logging import configure_logging
from ..config import (
    GENERIC_ERROR_MESSAGE,
    INVALID_DATA_MESSAGE,
    NOTES_COLLECTION,
    REPORT_COLLECTION,
    VIM_COLLECTION,
    get_bind,
    get_cors_origins,
    is_development,
)
from ..db import close_client, get_database
from ..models import Note, Report, VimCommand, to_document
from ..search import filter_records
from ..store import CollectionStore, EntryNotFound, InvalidEntryId

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=5184000; includeSubDomains",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_client()


app = FastAPI(
    title="Reflect",
    description="Personal knowledge base: vim commands, daily reports and notes",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db() -> Database:
    """Dependency returning the database. Overridden in tests."""
    return get_database()


# ─────────────────────────────────────────────────────────────────────────────
# Middleware and error handling
# ─────────────────────────────────────────────────────────────────────────────


def _apply_security_headers(response: Response) -> Response:
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    return _apply_security_headers(response)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _error(400, INVALID_DATA_MESSAGE)


@app.exception_handler(InvalidEntryId)
async def invalid_id_handler(request: Request, exc: InvalidEntryId):
    return _error(400, str(exc))


@app.exception_handler(EntryNotFound)
async def not_found_handler(request: Request, exc: EntryNotFound):
    return _error(404, str(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Runs outside the middleware stack, so headers are applied here as well
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if is_development() else GENERIC_ERROR_MESSAGE
    return _apply_security_headers(_error(500, message))


# ─────────────────────────────────────────────────────────────────────────────
# Collection routes
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CollectionApi:
    """Naming of one collection's endpoints and response keys."""

    name: str
    model: type[BaseModel]
    list_key: str
    item_key: str
    id_key: str
    added_message: str
    updated_message: str
    deleted_message: str


NOTES_API = CollectionApi(
    name=NOTES_COLLECTION,
    model=Note,
    list_key="notes",
    item_key="notes",
    id_key="noteId",
    added_message="new notes saved",
    updated_message="note updated successfully",
    deleted_message="note deleted successfully",
)

REPORT_API = CollectionApi(
    name=REPORT_COLLECTION,
    model=Report,
    list_key="reports",
    item_key="report",
    id_key="reportId",
    added_message="new report saved",
    updated_message="report updated",
    deleted_message="report deleted successfully",
)

VIM_API = CollectionApi(
    name=VIM_COLLECTION,
    model=VimCommand,
    list_key="vimCommands",
    item_key="vimCommand",
    id_key="vimId",
    added_message="new vim command saved",
    updated_message="vim command updated",
    deleted_message="vim command deleted successfully",
)


def build_router(collection: CollectionApi) -> APIRouter:
    """Create list/get/add/update/delete routes for one collection."""
    router = APIRouter(prefix=f"/{collection.name}", tags=[collection.name])
    model = collection.model

    @router.get("")
    def list_entries(
        search: str | None = Query(None, description="Keep entries whose tags contain this"),
        ignore_case: bool = Query(False),
        db: Database = Depends(get_db),
    ):
        entries = CollectionStore(db, collection.name).list_all()
        if search:
            entries = filter_records(search, entries, case_sensitive=not ignore_case)
        return {collection.list_key: entries}

    # Registered before /{entry_id} so "add" is never taken for an id
    @router.post("/add")
    def add_entry(payload: model, db: Database = Depends(get_db)):
        entry_id = CollectionStore(db, collection.name).insert(to_document(payload))
        return {collection.id_key: entry_id, "message": collection.added_message}

    @router.get("/{entry_id}")
    def get_entry(entry_id: str, db: Database = Depends(get_db)):
        return {collection.item_key: CollectionStore(db, collection.name).get(entry_id)}

    @router.patch("/{entry_id}")
    def update_entry(entry_id: str, payload: model, db: Database = Depends(get_db)):
        matched, modified = CollectionStore(db, collection.name).update(entry_id, to_document(payload))
        return {
            "response": {"matchedCount": matched, "modifiedCount": modified},
            "message": collection.updated_message,
        }

    @router.delete("/{entry_id}")
    def delete_entry(entry_id: str, db: Database = Depends(get_db)):
        deleted = CollectionStore(db, collection.name).delete(entry_id)
        return {"message": collection.deleted_message, "response": deleted}

    return router


for _collection in (NOTES_API, REPORT_API, VIM_API):
    app.include_router(build_router(_collection))


@app.get("/health")
async def health():
    """Liveness check. Does not touch the database."""
    return {"status": "ok"}


@app.get("/")
async def root():
    return {"message": "Reflect API", "docs": "/docs"}


def main(host: str | None = None, port: int | None = None, reload: bool = False):
    """Run the API server."""
    import uvicorn

    configure_logging()
    default_host, default_port = get_bind()
    host = host or default_host
    port = port or default_port
    logger.info("Serving at http://%s:%d", host, port)
    if reload:
        uvicorn.run("reflect.webapp.api:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
