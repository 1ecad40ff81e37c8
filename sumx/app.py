"""FastAPI application for the SumX research paper analyzer."""
from __future__ import annotations

import logging
import time
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.analysis import ErrorResponse
from .config import get_settings
from .errors import AggregateFailure, DocumentExtractionError, InputValidationError
from .routers.analysis import router as analysis_router
from .routers.health import router as health_router
from .utils.logging import configure_logging

LOGGER = logging.getLogger(__name__)


def _error(status_code: int, error: str, details: object | None = None) -> JSONResponse:
    envelope = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(exclude_none=True))


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="SumX Research Paper Analyzer", version=__version__)
    app.include_router(health_router)
    app.include_router(analysis_router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        LOGGER.info(
            "%s %s - %s - %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response

    @app.exception_handler(InputValidationError)
    async def _input_validation(request: Request, exc: InputValidationError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(DocumentExtractionError)
    async def _document_error(request: Request, exc: DocumentExtractionError) -> JSONResponse:
        LOGGER.warning("File processing failed for %s: %s", request.url.path, exc)
        return _error(exc.status_code, "File processing failed", str(exc))

    @app.exception_handler(AggregateFailure)
    async def _aggregate_failure(request: Request, exc: AggregateFailure) -> JSONResponse:
        last = exc.last_failure
        LOGGER.error(
            "All %d models failed for %s; last model %s",
            len(exc.failures),
            request.url.path,
            last.model_name if last else "-",
        )
        return _error(502, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        return _error(400, "Validation failed", details)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error(404, "Not Found", f"Route {request.method} {request.url.path} not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = "Internal server error" if settings.is_production else str(exc)
        return _error(500, message)

    frontend_dir = Path(__file__).resolve().parent.parent / "frontend"
    if frontend_dir.exists():
        app.mount("/", StaticFiles(directory=str(frontend_dir), html=True), name="frontend")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()
