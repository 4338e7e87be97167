"""
Exception handlers rendering every failure as ``{"success": false, "error": ...}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from devcamper.core.errors import (
    DuplicateDocumentError,
    ErrorResponse,
    InvalidIdError,
    QueryExecutionError,
)

logger = logging.getLogger(__name__)


def error_body(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def error_response_handler(request: Request, exc: ErrorResponse) -> JSONResponse:
    logger.debug("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_body(exc.message, exc.status_code)


async def duplicate_document_handler(request: Request, exc: DuplicateDocumentError) -> JSONResponse:
    message = "Duplicate field value entered"
    if exc.fields:
        message = f"{message} for {', '.join(exc.fields)}"
    return error_body(message, 400)


async def invalid_id_handler(request: Request, exc: InvalidIdError) -> JSONResponse:
    return error_body(f"Resource not found with id of {exc.value}", 404)


async def query_execution_handler(request: Request, exc: QueryExecutionError) -> JSONResponse:
    logger.error("Query failed for %s %s: %s", request.method, request.url.path, exc.message)
    return error_body(exc.message or "Server Error", 500)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body and parameter validation failures, one phrase per field."""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        messages.append(f"{error.get('msg')} for the {'.'.join(location) or 'request'} field")
    return error_body(", ".join(messages), 400)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_body(detail, exc.status_code)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
    return error_body("Server Error", 500)


def install_error_handlers(app: FastAPI) -> None:
    """Install error handlers on a FastAPI app."""
    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(DuplicateDocumentError, duplicate_document_handler)
    app.add_exception_handler(InvalidIdError, invalid_id_handler)
    app.add_exception_handler(QueryExecutionError, query_execution_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
