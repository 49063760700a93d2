"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

# stdout is reserved for the generated diagram
console = Console(theme=_THEME, stderr=True)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def schemas_table(self, schemas: Iterable[Any], title: str = "Schemas") -> None:
        """
        Render a per-schema object count summary.

        Expects objects like dbdoc.core.models.Schema.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Schema", style="ok", no_wrap=True)
        t.add_column("Tables", justify="right")
        t.add_column("Views", justify="right")
        t.add_column("Mat. views", justify="right")
        t.add_column("Enums", justify="right")
        t.add_column("Composite types", justify="right")
        t.add_column("Relationships", justify="right")

        for s in schemas:
            t.add_row(
                s.name,
                str(len(s.tables)),
                str(len(s.views)),
                str(len(s.materialized_views)),
                str(len(s.db_enums)),
                str(len(s.composite_types)),
                str(len(s.foreign_keys)),
            )

        console.print(t)

    def tables_table(self, schema: Any, title: str | None = None) -> None:
        """Render the tables of one schema with key and partition details."""
        t = Table(title=title or f"Tables in {schema.name}", show_lines=False)
        t.add_column("Table", style="ok")
        t.add_column("Columns", justify="right")
        t.add_column("Primary key", style="meta")
        t.add_column("Foreign keys", justify="right")
        t.add_column("Partitioning", style="meta")

        for table in schema.tables:
            t.add_row(
                table.name,
                str(len(table.columns)),
                ", ".join(table.primary_key_columns),
                str(len(table.foreign_keys)),
                table.partition_key or "",
            )

        console.print(t)


out = Out()
