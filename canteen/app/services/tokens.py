"""Pickup token generation."""

from __future__ import annotations

import secrets
from typing import Iterable


def generate_token(
    taken: Iterable[str] = (),
    length: int = 4,
    max_attempts: int = 20,
) -> str:
    """Return a numeric pickup code not present in ``taken``.

    Codes are ``length`` digits. After ``max_attempts`` collisions the code
    grows by one digit and drawing starts again.
    """

    used = set(taken)
    size = max(length, 1)
    while True:
        for _ in range(max_attempts):
            token = "".join(secrets.choice("0123456789") for _ in range(size))
            if token not in used:
                return token
        size += 1
