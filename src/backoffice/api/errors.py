"""Translate domain and storage errors into HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from backoffice.exceptions import (
    AlreadyExists,
    ConcurrencyConflict,
    DependencyNotFound,
    RelocationInconsistency,
)

logger = structlog.get_logger(__name__)


async def _not_found(_request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _validation_failed(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.messages})


async def _conflict(_request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def _missing_dependency(_request: Request, exc: DependencyNotFound) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "identifier": exc.identifier})


async def _relocation_failed(_request: Request, exc: RelocationInconsistency) -> JSONResponse:
    logger.error("Request left store inconsistent", unique_id=exc.unique_id, stage=exc.stage)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ValidationError, _validation_failed)
    app.add_exception_handler(AlreadyExists, _conflict)
    app.add_exception_handler(ConcurrencyConflict, _conflict)
    app.add_exception_handler(DependencyNotFound, _missing_dependency)
    app.add_exception_handler(RelocationInconsistency, _relocation_failed)
