"""Map the error taxonomy onto HTTP responses.

Every error body is ``{"error": <messages>}``. Stack traces and storage
details never reach the client.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from commerce.exceptions import (
    ConflictError,
    ForbiddenError,
    InsufficientStockError,
    InternalError,
    error_messages,
)

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    ValidationError: 400,
    InsufficientStockError: 400,
    ObjectNotFoundError: 404,
    ForbiddenError: 403,
    ConflictError: 409,
    InternalError: 500,
}


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    for exc_class, status_code in STATUS_CODES.items():

        async def handler(request: Request, exc: Exception, status_code=status_code) -> JSONResponse:
            return JSONResponse(status_code=status_code, content={"error": error_messages(exc)})

        app.add_exception_handler(exc_class, handler)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
            errors.setdefault(field, []).append(error["msg"])
        return JSONResponse(status_code=400, content={"error": errors})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path)
        return JSONResponse(status_code=500, content={"error": {"error": ["An unexpected error occurred"]}})
