"""Row reading contract for catalog query results.

The core never touches a driver cursor directly. Query executors hand back
an iterable of `Row` objects, and row mappers read typed values from them by
column name. Any problem reading a row (a missing column, a value of the
wrong shape) surfaces as CatalogAccessError, the same error a failing query
raises, so that callers handle one data-access failure type.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping


class CatalogAccessError(RuntimeError):
    """Raised when a catalog query fails or one of its rows cannot be read."""


_TRUE_STRINGS = {"t", "true", "yes", "y", "1"}
_FALSE_STRINGS = {"f", "false", "no", "n", "0", ""}


class Row:
    """A single catalog row, readable by column name."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]):
        self._values = values

    def __repr__(self) -> str:
        return f"Row({dict(self._values)!r})"

    def _get(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError as exc:
            raise CatalogAccessError(f"Column '{name}' missing from result row") from exc

    def optional_string(self, name: str) -> str | None:
        """Read a text column; SQL NULL becomes None."""
        value = self._get(name)
        return None if value is None else str(value)

    def string(self, name: str) -> str:
        """Read a text column that must not be NULL."""
        value = self.optional_string(name)
        if value is None:
            raise CatalogAccessError(f"Column '{name}' must not be null")
        return value

    def optional_integer(self, name: str) -> int | None:
        """Read an integer column; SQL NULL becomes None."""
        value = self._get(name)
        if value is None:
            return None
        if isinstance(value, bool):
            raise CatalogAccessError(f"Column '{name}' is not an integer: {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise CatalogAccessError(
                f"Column '{name}' is not an integer: {value!r}"
            ) from exc

    def integer(self, name: str) -> int:
        """Read an integer column; SQL NULL reads as 0."""
        value = self.optional_integer(name)
        return 0 if value is None else value

    def boolean(self, name: str) -> bool:
        """Read a boolean column; SQL NULL reads as False."""
        value = self._get(name)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise CatalogAccessError(f"Column '{name}' is not a boolean: {value!r}")


def rows(records: Iterable[Mapping[str, Any]]) -> Iterator[Row]:
    """Wrap plain mappings (e.g. dict cursor records) as Row objects."""
    for record in records:
        yield Row(record)
