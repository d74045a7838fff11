"""
FastAPI exception handlers that render typed service failures as JSON.

Status codes and payloads come from the exception classes themselves
(`http_status()` / `to_payload()`); these handlers only log and wrap.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
from resource_crud.exceptions.base import (
    ServiceError,
    ValidationError,
    NotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("ValidationError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's own request errors (e.g. a body that is not JSON) in the service payload shape."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        # ("body", 12) -> "body"
        field = ".".join(str(part) for part in err.get("loc", ()) if isinstance(part, str)) or "body"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value."))
    logger.info("RequestValidationError for %s %s: fields=%s", request.method, request.url.path, sorted(errors))
    return await validation_error_handler(request, ValidationError(errors))


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("NotFoundError for %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    # the stack trace was already logged where the storage failure was mapped
    logger.error("StorageError for %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Fallback for any other ServiceError (e.g. InvalidFieldError)."""
    logger.warning("ServiceError for %s %s: %s", request.method, request.url.path, str(exc))
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


def register_exception_handlers(app) -> None:
    # Most specific first
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
