"""Sentry error reporting.

Reporting is enabled only when ``ERROR_DSN`` (or an explicit ``dsn``) is
given. Events are scrubbed with :func:`redact_text` before they leave the
process so student contact details and gateway keys never reach Sentry.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import sentry_sdk

from .redact import redact_text

logger = logging.getLogger("canteen.obs")


def _scrub(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any]:
    for exc in event.get("exception", {}).get("values", []):
        if isinstance(exc.get("value"), str):
            exc["value"] = redact_text(exc["value"])
    message = event.get("logentry", {}).get("message")
    if isinstance(message, str):
        event["logentry"]["message"] = redact_text(message)
    return event


def init_sentry(dsn: Optional[str] = None, env: Optional[str] = None) -> bool:
    """Start the Sentry client; return ``False`` when no DSN is configured."""
    dsn = dsn or os.getenv("ERROR_DSN")
    if not dsn:
        logger.info("ERROR_DSN not set; error sink disabled")
        return False
    sentry_sdk.init(dsn=dsn, environment=env, send_default_pii=False, before_send=_scrub)
    sentry_sdk.set_tag("service", "canteen")
    return True


def capture_exception(exc: Exception) -> None:
    if sentry_sdk.is_initialized():
        sentry_sdk.capture_exception(exc)
        return
    logger.error("Unhandled exception", exc_info=exc)
