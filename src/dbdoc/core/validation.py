"""Validation helpers shared by the domain models and configuration.

Every aggregate validates itself on construction so that an invalid object
can never exist. A failed check raises ValidationError, which signals a
mapping defect (or bad user input for configuration) and is never absorbed.
"""

from __future__ import annotations

from typing import Any, Sized


class ValidationError(ValueError):
    """Raised when a required field is missing, blank or otherwise invalid."""


def is_not_none(value: Any, prop: str) -> None:
    """Fail if value is None."""
    if value is None:
        raise ValidationError(f"{prop} must not be null")


def is_not_blank(value: str | None, prop: str) -> None:
    """Fail if value is None, empty or whitespace only."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{prop} must not be blank")


def contains_at_least_one_item(value: Sized | None, prop: str) -> None:
    """Fail if value is None or empty."""
    if value is None or len(value) == 0:
        raise ValidationError(f"{prop} must contain at least 1 item")


def is_positive(value: int, prop: str) -> None:
    """Fail if value is not a strictly positive integer."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValidationError(f"{prop} must be a positive integer")
