"""Exception handlers: every error leaves the API as
``{"success": false, "message": ..., "errors": [...]}``.

Register with register_exception_handlers(app).
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from amc_portal.config import get_settings
from amc_portal.exceptions import ConflictError, InternalError, PortalError, ValidationError

logger = logging.getLogger(__name__)

_UNIQUE_MARKERS = ("unique", "duplicate")


def _is_production(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None) or get_settings()
    return settings.is_production


def _error_response(exc: PortalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _portal_exception_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        if _is_production(request):
            return _error_response(InternalError())
    return _error_response(exc)


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return _error_response(ValidationError("Validation errors", errors))


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


def _integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    detail = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    logger.warning(f"Constraint violation on {request.method} {request.url.path}: {detail}")
    if any(marker in detail for marker in _UNIQUE_MARKERS):
        return _error_response(ConflictError())
    return _error_response(ValidationError("Invalid reference or constraint violation"))


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    message = InternalError.default_message if _is_production(request) else str(exc) or InternalError.default_message
    return _error_response(InternalError(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, _portal_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(IntegrityError, _integrity_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
