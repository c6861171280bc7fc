"""Response envelopes shared by every JSON route.

Success: ``{"ok": true, "data": ...}``. Failure: ``{"ok": false,
"request_id": ..., "error": {"code", "message"[, "details", "hint"]}}``.
"""

from typing import Any, Dict

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def ok(data: Any) -> Dict[str, Any]:
    return {"ok": True, "data": jsonable_encoder(data)}


def err(
    code: int | str,
    message: str,
    details: Dict[str, Any] | None = None,
    hint: str | None = None,
) -> Dict[str, Any]:
    from ..middlewares.request_id import request_id_ctx

    error: Dict[str, Any] = {"code": code, "message": message}
    for key, value in (("details", details), ("hint", hint)):
        if value:
            error[key] = value
    return {"ok": False, "request_id": request_id_ctx.get(None), "error": error}


def error_response(
    status_code: int, code: int | str, message: str, **extra: Any
) -> JSONResponse:
    """Build a ``JSONResponse`` carrying the failure envelope."""

    return JSONResponse(err(code, message, **extra), status_code=status_code)
