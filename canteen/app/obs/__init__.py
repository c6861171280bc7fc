"""Logging, redaction and error reporting."""

from .errors import capture_exception, init_sentry
from .logging import configure_logging
from .redact import redact_text

__all__ = ["capture_exception", "init_sentry", "configure_logging", "redact_text"]
