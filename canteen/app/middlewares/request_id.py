"""Per-request correlation id.

The id is taken from ``X-Request-ID`` when the caller sends a usable one and
generated otherwise. It is published through :data:`request_id_ctx` so log
records and error envelopes can carry it without threading it through calls.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

HEADER = "X-Request-ID"
_USABLE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def resolve_request_id(incoming: str | None) -> str:
    """Return ``incoming`` when it is a short token, else a fresh id."""
    if incoming and _USABLE.match(incoming):
        return incoming
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(HEADER))
        request.state.request_id = rid
        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[HEADER] = rid
        return response
