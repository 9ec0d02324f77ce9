import uuid
import logging
from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from qrdine.core.config import MASK_FORBIDDEN_AS_NOT_FOUND
from qrdine.core.errors import QRDineError, Forbidden, NotFound

log = logging.getLogger("qrdine.exceptions")


# Generate a clean request id for every response
def _rid():
    """Generates a unique request ID for tracing."""
    return uuid.uuid4().hex


def _error_body(code: str, message, **extra):
    error = {"code": code, "message": message}
    error.update(extra)
    return {
        "success": False,
        "error": error,
        "request_id": _rid(),
    }


# ----------- Exception Handlers (called by FastAPI) -----------

def app_error_handler(request: Request, exc: QRDineError):
    """Handles the typed service errors (validation, not found, forbidden, ...)."""
    if isinstance(exc, Forbidden):
        log.warning(f"Forbidden access on path: {request.url.path}")
        if MASK_FORBIDDEN_AS_NOT_FOUND:
            exc = NotFound()
    elif exc.status_code >= 500:
        log.error(f"{exc.code} on path {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.message))


def http_exception_handler(request: Request, exc: HTTPException):
    """Handles exceptions raised by HTTPException (e.g., 404, 400)."""
    return JSONResponse(status_code=exc.status_code, content=_error_body("http_error", exc.detail))


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles Pydantic validation errors (422 Unprocessable Entity)."""
    body = _error_body("validation_error", "Invalid input data", details=exc.errors())
    # exc.errors() may carry non-JSON values (e.g. Decimal limits) in "ctx"
    return JSONResponse(status_code=422, content=jsonable_encoder(body))


def generic_exception_handler(request: Request, exc: Exception):
    """Handles all unhandled exceptions (500 Internal Server Error)."""
    log.exception(f"Unhandled exception on path: {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("server_error", "Internal Server Error"))


# ----------- Registration Function -----------

def setup_exception_handlers(app: FastAPI):
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(QRDineError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app
