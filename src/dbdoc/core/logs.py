"""Helpers for putting catalog-supplied text into log records."""

from __future__ import annotations

from typing import Any


def clean(value: Any) -> str:
    """Return value as single-line text: CR dropped, LF replaced by a space."""
    return str(value).replace("\r", "").replace("\n", " ")
