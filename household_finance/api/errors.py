"""Map domain exceptions to HTTP responses"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from household_finance.api.dependencies import get_request_id
from household_finance.domain.exceptions import (
    ConflictError,
    DomainException,
    NotFoundError,
    StorageError,
    ValidationError,
)
from household_finance.infrastructure.observability.metrics import domain_error_counter

STATUS_BY_EXCEPTION = (
    (ValidationError, 422),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageError, 503),
)


def status_for(exc: DomainException) -> int:
    for exc_type, status in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status
    return 500


async def handle_domain_exception(request: Request, exc: DomainException) -> JSONResponse:
    status = status_for(exc)
    domain_error_counter.labels(error=exc.code).inc()

    log = logging.error if status >= 500 else logging.warning
    log(f"{exc.code}: {exc.message}", extra={"request_id": get_request_id(request), "path": request.url.path})

    body = {"error": exc.code, "detail": exc.message, "fields": getattr(exc, "errors", {})}
    return JSONResponse(status_code=status, content=body)


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Raised outside the repositories, e.g. on commit
    return await handle_domain_exception(request, StorageError(f"Database error: {exc.__class__.__name__}"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, handle_domain_exception)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
