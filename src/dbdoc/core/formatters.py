"""Formatter chains for entity lines and relationship lines.

A chain is an ordered tuple of pure stage functions folded left, starting
from None. Each stage gets the object being formatted plus the current
value and returns the new value.

Entity line stages take `(table, column, current)`; relationship stages
take `(foreign_key, current_schema, current)`.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Callable, Optional, Union

from dbdoc.core.models import (
    Column,
    ForeignKey,
    MaterializedView,
    ReferentialAction,
    Table,
    View,
    sort_constraints,
)

Owner = Union[Table, View, MaterializedView]
EntityStage = Callable[[Owner, Column, Optional[str]], Optional[str]]
RelationshipStage = Callable[[ForeignKey, str, Optional[str]], Optional[str]]

CONNECTOR = " -- "
NULLABLE_CONNECTOR = " ||--o{ "
REQUIRED_CONNECTOR = " ||--|{ "


def default_entity_line(owner: Owner, column: Column, current: str | None) -> str:
    if current is not None:
        return current
    if column.maximum_length > 0:
        return f"{column.name}: {column.data_type}({column.maximum_length})"
    return f"{column.name}: {column.data_type}"


def primary_key_entity_line(owner: Owner, column: Column, current: str | None) -> str | None:
    primary_key_columns = getattr(owner, "primary_key_columns", ())
    if current is not None and column.name in primary_key_columns:
        return f"**{current}**"
    return current


def constraint_entity_line(owner: Owner, column: Column, current: str | None) -> str | None:
    if current is None or not column.constraints:
        return current
    names = ",".join(c.name for c in sort_constraints(column.constraints))
    return f"{current} <<{names}>>"


def default_relationship(fk: ForeignKey, current_schema: str, current: str | None) -> str:
    if current is not None:
        return current
    if fk.referenced_schema is not None and fk.referenced_schema != current_schema:
        return (
            f"{fk.referenced_schema}.{fk.target_table}"
            f"{CONNECTOR}{current_schema}.{fk.source_table}"
        )
    return f"{fk.target_table}{CONNECTOR}{fk.source_table}"


def cardinality(fk: ForeignKey, current_schema: str, current: str | None) -> str | None:
    if current is None:
        return None
    connector = NULLABLE_CONNECTOR if fk.is_nullable else REQUIRED_CONNECTOR
    return current.replace(CONNECTOR, connector)


def referential_action(fk: ForeignKey, current_schema: str, current: str | None) -> str | None:
    if current is None:
        return None
    parts = []
    if fk.on_delete is not ReferentialAction.NO_ACTION:
        parts.append(f"ON DELETE {fk.on_delete.display_name}")
    if fk.on_update is not ReferentialAction.NO_ACTION:
        parts.append(f"ON UPDATE {fk.on_update.display_name}")
    if not parts:
        return current
    return f'{current} : "{" / ".join(parts)}"'


@dataclass(frozen=True)
class EntityLineFormatter:
    """Callable entity-line chain; stateless and reusable."""

    stages: tuple[EntityStage, ...]

    def __call__(self, owner: Owner, column: Column) -> str:
        return reduce(
            lambda current, stage: stage(owner, column, current), self.stages, None
        )


@dataclass(frozen=True)
class RelationshipFormatter:
    """Callable relationship-line chain; stateless and reusable."""

    stages: tuple[RelationshipStage, ...]

    def __call__(self, fk: ForeignKey, current_schema: str) -> str:
        return reduce(
            lambda current, stage: stage(fk, current_schema, current), self.stages, None
        )


def create_entity_line_formatter() -> EntityLineFormatter:
    return EntityLineFormatter(
        (default_entity_line, primary_key_entity_line, constraint_entity_line)
    )


def create_relationship_formatter() -> RelationshipFormatter:
    return RelationshipFormatter((default_relationship, cardinality, referential_action))
