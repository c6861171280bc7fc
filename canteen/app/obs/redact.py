"""Masking of personal data and credentials in free text."""

import re

SECRET_RE = re.compile(r"\bcfsk_[A-Za-z0-9_]+")
EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
UPI_RE = re.compile(r"\b[\w.-]+@[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(?<!\d)(?:\+?91[ -]?)?[6-9]\d{9}(?!\d)")

MASK = "***"


def redact_text(text: str) -> str:
    # Emails first so the UPI pattern does not eat their local part.
    for pattern in (SECRET_RE, EMAIL_RE, UPI_RE, PHONE_RE):
        text = pattern.sub(MASK, text)
    return text
