"""User-defined type resolution and foreign-key enrichment.

The catalog reports enum and composite columns with the placeholder type
`USER-DEFINED`. A TypeResolutionContext, built fresh for each table or view,
swaps that placeholder for the real type name: bare within the owning
schema, `schema.type` across schemas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Union

from dbdoc.core.logs import clean
from dbdoc.core.models import (
    USER_DEFINED,
    Column,
    ColumnKey,
    Constraint,
    DbCompositeType,
    DbEnum,
    ForeignKey,
    TypeKey,
    UdtReference,
)

logger = logging.getLogger(__name__)

TypeDefinition = Union[DbEnum, DbCompositeType]


@dataclass(frozen=True)
class TypeResolutionContext:
    """Lookups needed to resolve the placeholder type of one object's columns."""

    column_udt_mappings: Mapping[ColumnKey, UdtReference]
    types_by_key: Mapping[TypeKey, TypeDefinition]
    table_name: str
    schema: str

    def resolve(self, column: Column) -> Column:
        """Return the column with its placeholder type resolved, if it has one."""
        if column.data_type != USER_DEFINED:
            return column

        reference = self.column_udt_mappings.get(ColumnKey(self.table_name, column.name))
        if reference is None:
            logger.warning(
                "No user-defined type mapping for %s.%s.%s, keeping %s",
                clean(self.schema),
                clean(self.table_name),
                clean(column.name),
                USER_DEFINED,
            )
            return column

        if reference.udt_schema == self.schema:
            if reference.key not in self.types_by_key:
                logger.warning(
                    "Column %s.%s.%s references type %s, which is not defined in %s",
                    clean(self.schema),
                    clean(self.table_name),
                    clean(column.name),
                    clean(reference.udt_name),
                    clean(self.schema),
                )
            return column.with_data_type(reference.udt_name)
        return column.with_data_type(f"{reference.udt_schema}.{reference.udt_name}")


def map_user_defined_types(
    columns: Iterable[Column], context: TypeResolutionContext
) -> list[Column]:
    return [context.resolve(column) for column in columns]


def _find_source_column(columns: list[Column], name: str) -> Column | None:
    for column in columns:
        if column.name == name:
            return column
    lowered = name.lower()
    for column in columns:
        if column.name.lower() == lowered:
            return column
    return None


def enrich_with_nullability(
    foreign_keys: Iterable[ForeignKey], columns: Iterable[Column]
) -> list[ForeignKey]:
    """
    Copy the source column's nullability onto each foreign key.

    An exact name match wins; otherwise the first case-insensitive match is
    used. A key whose source column is not among `columns` is kept with
    `is_nullable=False`.
    """
    columns = list(columns)
    enriched: list[ForeignKey] = []
    for fk in foreign_keys:
        column = _find_source_column(columns, fk.source_column)
        if column is None:
            logger.warning(
                "Foreign key %s: source column %s.%s not found, assuming NOT NULL",
                clean(fk.name),
                clean(fk.source_table),
                clean(fk.source_column),
            )
            enriched.append(fk.with_nullability(False))
        else:
            enriched.append(fk.with_nullability(column.is_nullable))
    return enriched


def enrich_with_foreign_key_constraints(
    columns: Iterable[Column], foreign_keys: Iterable[ForeignKey]
) -> list[Column]:
    """Prepend FK to the constraints of every column that is a foreign-key source."""
    fk_columns = {fk.source_column.lower() for fk in foreign_keys}
    enriched: list[Column] = []
    for column in columns:
        if column.name.lower() in fk_columns and Constraint.FK not in column.constraints:
            column = replace(column, constraints=(Constraint.FK, *column.constraints))
        enriched.append(column)
    return enriched
