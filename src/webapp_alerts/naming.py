"""Random resource names for the provisioned sample resources."""

from __future__ import annotations

import random

# Shortest limit among the resource types created (App Service plan names)
DEFAULT_MAX_LENGTH = 40


def create_random_name(prefix: str, digits: int = 4, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Return ``prefix`` followed by ``digits`` random decimal digits.

    The prefix is truncated so the full name never exceeds ``max_length``.
    """
    if digits < 1:
        raise ValueError("digits must be at least 1")
    if max_length <= digits:
        raise ValueError("max_length must leave room for the random suffix")

    suffix = "".join(random.choices("0123456789", k=digits))
    return f"{prefix[: max_length - digits]}{suffix}"
