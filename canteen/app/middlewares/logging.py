"""Access log middleware.

Every request produces an ``in`` and an ``out`` JSON line on the
``canteen.http`` logger. Successful responses are sampled at
``LOG_SAMPLE_2XX``; anything else is always logged. Body and query fields
that can identify a student or leak gateway credentials are masked.
"""

import json
import logging
import os
import random
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..utils.responses import err
from .request_id import HEADER, request_id_ctx, resolve_request_id

PII_KEYS = {
    "email",
    "phone",
    "upi_id",
    "upiid",
    "customer_phone",
    "customerphone",
    "customer_email",
    "customeremail",
    "secret",
    "x-client-secret",
}
LOG_SAMPLE_2XX = float(os.getenv("LOG_SAMPLE_2XX", "0.1"))

logger = logging.getLogger("canteen.http")


def _redact(obj):
    if isinstance(obj, dict):
        return {k: "***" if k.lower() in PII_KEYS else _redact(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_redact(v) for v in obj]
    return obj


def _should_log(status: int) -> bool:
    if 200 <= status < 300:
        return random.random() < LOG_SAMPLE_2XX
    return True


class LoggingMiddleware(BaseHTTPMiddleware):
    async def _read_body(self, request: Request):
        raw = await request.body()

        # Replay the consumed body for the downstream app.
        async def receive() -> dict:
            return {"type": "http.request", "body": raw, "more_body": False}

        request._receive = receive
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            return None

    async def dispatch(self, request: Request, call_next):
        rid = getattr(request.state, "request_id", None)
        ctx_token = None
        if rid is None:
            rid = resolve_request_id(request.headers.get(HEADER))
            request.state.request_id = rid
            ctx_token = request_id_ctx.set(rid)

        entry = {
            "req_id": rid,
            "dir": "in",
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else None,
        }
        if request.query_params:
            entry["query"] = _redact(dict(request.query_params))
        body = await self._read_body(request)
        if body is not None:
            entry["body"] = _redact(body)

        started = time.perf_counter()
        crash_id = None
        try:
            response = await call_next(request)
        except Exception:
            crash_id = uuid.uuid4().hex
            logger.exception(json.dumps({"req_id": rid, "crash_id": crash_id}))
            payload = err(500, "Internal Server Error")
            payload["crash_id"] = crash_id
            response = JSONResponse(payload, status_code=500)

        status = response.status_code
        result = {
            "req_id": rid,
            "dir": "out",
            "path": request.url.path,
            "status": status,
            "latency_ms": round((time.perf_counter() - started) * 1000),
        }
        if crash_id:
            result["crash_id"] = crash_id
        if _should_log(status):
            logger.info(json.dumps(entry))
            if status >= 500:
                logger.error(json.dumps(result))
            else:
                logger.info(json.dumps(result))

        response.headers[HEADER] = rid
        if ctx_token is not None:
            request_id_ctx.reset(ctx_token)
        return response
