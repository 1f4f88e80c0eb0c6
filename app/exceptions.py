"""
Catalog error kinds.

Service code raises these; ``app.error_handlers`` turns them into response
envelopes.  Each error knows its HTTP status and how it renders, so the
handlers stay a thin mapping.
"""
import traceback
from typing import Any

from pydantic import ValidationError

from app.config import settings

_REQUEST_PARTS = frozenset({"body", "query", "path", "header", "cookie"})


class CatalogError(Exception):
    """Base class for every error that maps onto an HTTP response."""

    status_code: int = 500

    def to_response(self) -> dict[str, Any]:
        raise NotImplementedError


class ValidationFailed(CatalogError):
    """Client-supplied attributes are missing or malformed."""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("The given data was invalid.")
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc: ValidationError | Any) -> "ValidationFailed":
        """
        Collapse pydantic/FastAPI error entries into ``{field: [messages]}``.

        Accepts anything exposing ``errors()`` (``pydantic.ValidationError``
        and ``fastapi.exceptions.RequestValidationError``).  The leading
        ``body``/``query``/``path`` segment FastAPI adds is dropped.
        """
        errors: dict[str, list[str]] = {}
        for entry in exc.errors():
            loc = list(entry.get("loc", ()))
            if loc and loc[0] in _REQUEST_PARTS:
                loc = loc[1:]
            field = ".".join(str(p) for p in loc) or "body"
            errors.setdefault(field, []).append(entry.get("msg", "Invalid value"))
        return cls(errors)

    def to_response(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "error": "Validation failed",
            "errors": self.errors,
        }


class NotFound(CatalogError):
    status_code = 404

    def __init__(self, resource: str = "Product"):
        super().__init__(f"{resource} not found!")

    def to_response(self) -> dict[str, Any]:
        return {"error": str(self)}


class PersistenceFailed(CatalogError):
    """
    A store operation failed; any open transaction has been rolled back.

    ``error`` is the generic, client-facing label.  ``detail`` and ``line``
    describe the underlying exception and are only rendered when
    ``settings.EXPOSE_ERROR_DETAILS`` is on.
    """

    status_code = 500

    def __init__(self, error: str, cause: BaseException | None = None):
        super().__init__(error)
        self.error = error
        self.detail = str(cause) if cause is not None else ""
        self.line = _raise_line(cause)

    def to_response(self) -> dict[str, Any]:
        if not settings.EXPOSE_ERROR_DETAILS:
            return {"error": self.error}
        return {
            "message": f"Something went wrong {self.detail}".rstrip(),
            "line": self.line,
            "error": self.error,
        }


def _raise_line(exc: BaseException | None) -> int | None:
    """Line number of the innermost frame *exc* was raised from."""
    if exc is None or exc.__traceback__ is None:
        return None
    frames = traceback.extract_tb(exc.__traceback__)
    return frames[-1].lineno if frames else None
