"""
Global exception handlers.

- ``CatalogError`` → the error's own status and envelope.
- ``RequestValidationError`` (body failed to parse) → same 422 envelope as
  ``ValidationFailed``.
- Anything else → 500 with the generic label; detail only when
  ``EXPOSE_ERROR_DETAILS`` is on.

Client errors (4xx) are logged at warning level for validation failures and
at info otherwise; 500s are logged at error.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError

from app.exceptions import CatalogError, PersistenceFailed, ValidationFailed
from app.responses import envelope

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        elif isinstance(exc, ValidationFailed):
            logger.warning("Validation error on %s: %s", request.url.path, exc.errors)
        else:
            logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
        return envelope(exc.status_code, **exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        failure = ValidationFailed.from_pydantic(exc)
        logger.warning("Validation error on %s: %s", request.url.path, failure.errors)
        return envelope(failure.status_code, **failure.to_response())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
        )
        failure = PersistenceFailed("Something went wrong", exc)
        return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, **failure.to_response())
