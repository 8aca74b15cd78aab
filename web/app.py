from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from billbook.db import initialize_db
from billbook.errors import NotFoundError, StoreError, ValidationError
from billbook.logging import configure_logging, reconfigure
from web.deps import DBConnectionMiddleware
from web.routes.bill import router as bill_router

configure_logging("web")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Alembic's fileConfig may have replaced the handlers
    reconfigure()
    logger.info("Application started")
    yield


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)

app.include_router(bill_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        {"error": "validation", "message": "Invalid input", "fields": exc.fields},
        status_code=422,
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info("Not found on %s %s: bill %s", request.method, request.url.path, exc.bill_id)
    return JSONResponse({"error": "not_found", "message": str(exc), "id": exc.bill_id}, status_code=404)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        {"error": "store", "message": "The bill store could not complete the request"},
        status_code=500,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"error": "internal", "message": "Internal Server Error"}, status_code=500)
