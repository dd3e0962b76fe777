"""
FastAPI application entry point for the journal backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from journal_backend.config import get_settings
from journal_backend.dependencies import get_settings_service
from journal_backend.errors import JournalApiError, format_validation_errors
from journal_backend.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Warm the settings cache so defaults are written before the first request.
    provider = app.dependency_overrides.get(get_settings_service, get_settings_service)
    try:
        provider().load()
    except JournalApiError as exc:
        logger.warning("Could not load settings at startup: %s", exc.message)
    yield


async def handle_api_error(request: Request, exc: JournalApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.as_dict(), status_code=exc.status_code)


async def handle_http_error(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Routing errors (unknown path, wrong verb) keep their headers, e.g. Allow.
    return JSONResponse(
        {"message": exc.detail}, status_code=exc.status_code, headers=exc.headers
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = f"Bad request: {format_validation_errors(exc.errors())}"
    return JSONResponse({"message": message}, status_code=400)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Journal Backend (FastAPI)", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(JournalApiError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
