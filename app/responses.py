from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

_UNSET: Any = object()


def envelope(
    status_code: int = 200,
    *,
    data: Any = _UNSET,
    message: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> JSONResponse:
    """
    Build the ``{data?, message?, error?}`` body every endpoint returns.

    Keys left at their defaults are omitted rather than sent as null;
    ``data=None`` is still emitted.  *extra* keys (``line``, ``errors``)
    are appended after the standard ones.
    """
    body: dict[str, Any] = {}
    if data is not _UNSET:
        body["data"] = data
    if message is not None:
        body["message"] = message
    if error is not None:
        body["error"] = error
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
