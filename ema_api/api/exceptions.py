"""FastAPI exception handlers for converting domain errors to HTTP responses.

Every failure leaves the API as ``{"error": kind, "message": ..., "details": [...]}``:

- 400 invalid_input: request validation and domain input violations
- 403 forbidden: authorization rule rejected the actor
- 404 not_found: entity or referenced entity absent
- 409 conflict: uniqueness or availability violation
- 500 internal_failure: anything unexpected (logged with stack trace)

Usage:
    from ema_api.api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from ema_api.config import settings
from ema_api.errors import DomainError, InvalidInput, violations_from_pydantic

logger = logging.getLogger(__name__)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a DomainError with its own status code and kind."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report pydantic request validation failures as invalid_input with field details."""
    error = InvalidInput("Validation error", details=violations_from_pydantic(exc.errors()))
    return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content=error.to_dict())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for uncaught exceptions; internals are hidden unless configured."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    content = {"error": "internal_failure", "message": "Internal server error"}
    if settings.expose_error_details:
        content["diagnostic"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
