"""Origin whitelist for the JSON API.

``allowed_origins`` comes from the comma separated setting of the same name;
an empty list admits every origin. Preflight requests from admitted origins
are answered here. Paths under ``open_paths`` are left alone because the
gateway proxy answers CORS itself.
"""

from __future__ import annotations

from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.status import HTTP_204_NO_CONTENT, HTTP_403_FORBIDDEN

from ..utils.responses import error_response

ALLOW_METHODS = "GET, POST, PATCH, DELETE, OPTIONS"
ALLOW_HEADERS = "content-type, x-request-id"


def parse_origins(raw: str | None) -> list[str]:
    return [o.strip().rstrip("/") for o in (raw or "").split(",") if o.strip()]


class CORSMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: Callable,
        allowed_origins: Iterable[str] | None = None,
        max_age: int = 600,
        open_paths: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.allowed = frozenset(allowed_origins or ())
        self.max_age = max_age
        self.open_paths = tuple(open_paths)

    def _admits(self, origin: str) -> bool:
        return not self.allowed or origin in self.allowed

    def _decorate(self, response: Response, origin: str) -> Response:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Max-Age"] = str(self.max_age)
        response.headers.setdefault("Vary", "Origin")
        return response

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[override]
        if self.open_paths and request.url.path.startswith(self.open_paths):
            return await call_next(request)

        origin = request.headers.get("origin")
        if origin is None:
            return await call_next(request)
        if not self._admits(origin):
            response = error_response(
                HTTP_403_FORBIDDEN, "FORBIDDEN_ORIGIN", f"Origin {origin} is not allowed"
            )
            response.headers["Vary"] = "Origin"
            return response

        if request.method == "OPTIONS" and "access-control-request-method" in request.headers:
            preflight = Response(status_code=HTTP_204_NO_CONTENT)
            preflight.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
            preflight.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
            return self._decorate(preflight, origin)

        return self._decorate(await call_next(request), origin)
