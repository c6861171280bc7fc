"""JSON log formatting for the canteen services.

Messages are scrubbed of Cashfree secret keys, email addresses, UPI handles
and ten digit phone numbers before they are written.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from ..middlewares.request_id import request_id_ctx
from .redact import redact_text

# Attributes copied from ``extra=`` when present on a record.
EXTRA_FIELDS = ("route", "status", "student_id", "order_id")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "req_id", None):
            record.req_id = request_id_ctx.get(None)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        out: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "req_id": getattr(record, "req_id", None),
            "msg": redact_text(record.getMessage()),
        }
        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                out[field] = value
        if record.exc_info:
            out["exc"] = redact_text(self.formatException(record.exc_info))
        return json.dumps(out, default=str)


def configure_logging(level: int = logging.INFO) -> None:
    """Send every record through a single JSON stream handler."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    # uvicorn installs its own access log; ours replaces it.
    logging.getLogger("uvicorn.access").propagate = False
