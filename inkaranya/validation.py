"""Client-side form validation errors."""
from __future__ import annotations

from typing import Any


class ValidationError(Exception):
    """Client-side validation failure; ``errors`` holds one message per problem."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def missing(required: dict[str, Any]) -> list[str]:
    """``"<label> is required."`` for every blank value in ``{label: value}``."""
    return [f"{label} is required." for label, value in required.items()
            if not str(value if value is not None else "").strip()]
