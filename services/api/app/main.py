from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from db.errors import SeedError, error_message
from db.seed import seed as seed_db
from services.api.app import repository
from services.api.app.auth import require_token
from services.api.app.db import CLIENT, get_collection, ping
from services.api.app.logging import add_request_logging, configure_logging, logger
from services.api.app.observability import add_metrics_middleware, record_seed_result, setup_tracing
from services.api.app.schemas import CollectionCreate, CollectionDocument, CollectionUpdate
from services.api.app.settings import SETTINGS


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

_background_tasks: set[asyncio.Task] = set()


async def run_seed() -> None:
    try:
        result = await seed_db(
            SETTINGS.seeds_dir,
            uri=SETTINGS.mongo_uri,
            database_name=SETTINGS.database_name,
            concurrency=SETTINGS.seed_concurrency,
        )
    except SeedError as exc:
        # The API keeps serving; seeding is best effort at startup.
        logger.error("startup_seed_aborted", error=error_message(exc))
        return
    except Exception as exc:
        # Nothing awaits this task; anything else would only surface as "exception was never retrieved".
        logger.exception("startup_seed_aborted", error=str(exc))
        return
    record_seed_result(result)
    logger.info("startup_seed_done", **result.summary())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if SETTINGS.use_mongo:
        try:
            await ping()
        except PyMongoError as exc:
            logger.error("mongo_connection_error", error=str(exc), hint="make sure mongod is running")
            raise
        logger.info("mongo_connected")

        if SETTINGS.seed_mongo:
            task = asyncio.create_task(run_seed())
            _background_tasks.add(task)
            task.add_done_callback(_background_tasks.discard)
    yield
    CLIENT.close()


app = FastAPI(title="Collection API", version="0.1.0", lifespan=lifespan)
configure_logging(SETTINGS.log_level)
if SETTINGS.tracing_enabled:
    setup_tracing(app, service_name="api")
add_metrics_middleware(app, service_name="api")
add_request_logging(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _security_headers(request: Request, call_next: Callable) -> Response:
    resp = await call_next(request)
    for k, v in SECURITY_HEADERS.items():
        resp.headers.setdefault(k, v)
    return resp


@app.exception_handler(PyMongoError)
async def _store_error(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("store_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/healthz")
async def healthz() -> dict:
    await ping()
    return {"ok": True}


@app.get("/api/collection", response_model=list[CollectionDocument], dependencies=[Depends(require_token)])
async def list_collection(collection: AsyncIOMotorCollection = Depends(get_collection)) -> list[dict]:
    return await repository.list_documents(collection)


@app.post(
    "/api/collection",
    status_code=201,
    response_model=CollectionDocument,
    dependencies=[Depends(require_token)],
)
async def create_collection_document(
    req: CollectionCreate, collection: AsyncIOMotorCollection = Depends(get_collection)
) -> dict:
    return await repository.create_document(collection, req.model_dump(by_alias=True, exclude_none=True))


@app.api_route(
    "/api/collection/{doc_id}",
    methods=["PUT", "PATCH"],
    response_model=CollectionDocument,
    dependencies=[Depends(require_token)],
)
async def update_collection_document(
    doc_id: str, req: CollectionUpdate, collection: AsyncIOMotorCollection = Depends(get_collection)
) -> dict:
    doc = await repository.update_document(collection, doc_id, req.model_dump(by_alias=True, exclude_unset=True))
    if doc is None:
        raise HTTPException(status_code=404, detail="Not Found")
    return doc


@app.delete("/api/collection/{doc_id}", status_code=204, dependencies=[Depends(require_token)])
async def delete_collection_document(
    doc_id: str, collection: AsyncIOMotorCollection = Depends(get_collection)
) -> Response:
    deleted = await repository.delete_document(collection, doc_id)
    logger.info("collection_document_deleted", doc_id=doc_id, deleted=deleted)
    return Response(status_code=204)
