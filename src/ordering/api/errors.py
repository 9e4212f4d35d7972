"""Translate errors into JSON responses.

Every error body has the shape ``{"success": false, "error": <kind>,
"message": <text>}``. Domain errors are mapped to HTTP by their kind; a
``detail`` field with diagnostic data is added outside production. Field
validation failures raised by commands and aggregates are reported as
``invalid_argument``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidDataError, ObjectNotFoundError
from protean.exceptions import ValidationError as FieldValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ordering.config import Settings
from shared.errors import DomainError, ErrorKind

logger = structlog.get_logger(__name__)

_HTTP_ERROR_KINDS = {
    401: "unauthorized",
    404: ErrorKind.NOT_FOUND.value,
    405: "method_not_allowed",
}


def error_body(kind: str, message: str, detail=None, include_detail: bool = False) -> dict:
    body = {"success": False, "error": kind, "message": message}
    if include_detail and detail:
        body["detail"] = jsonable_encoder(detail)
    return body


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    include_detail = not settings.is_production

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        logger.info("domain_error", error=exc.kind.value, message=exc.message, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.kind.value, exc.message, exc.details, include_detail),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=error_body(ErrorKind.INVALID_ARGUMENT.value, "Validation failed", exc.errors(), include_detail),
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400,
            content=error_body(
                ErrorKind.INVALID_ARGUMENT.value,
                "Validation failed",
                exc.errors(include_url=False),
                include_detail,
            ),
        )

    @app.exception_handler(FieldValidationError)
    @app.exception_handler(InvalidDataError)
    async def field_validation_handler(request: Request, exc: FieldValidationError | InvalidDataError):
        return JSONResponse(
            status_code=400,
            content=error_body(ErrorKind.INVALID_ARGUMENT.value, "Validation failed", exc.messages, include_detail),
        )

    @app.exception_handler(ObjectNotFoundError)
    async def object_not_found_handler(request: Request, exc: ObjectNotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_body(ErrorKind.NOT_FOUND.value, "Not found", str(exc), include_detail),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(_HTTP_ERROR_KINDS.get(exc.status_code, "http_error"), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path, method=request.method)
        return JSONResponse(
            status_code=500,
            content=error_body(ErrorKind.INTERNAL.value, "Internal server error", repr(exc), include_detail),
        )
