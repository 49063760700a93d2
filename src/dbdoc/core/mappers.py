"""Row mappers: one catalog row in, one typed fragment out.

`RowMapper` handles the result shapes of the `information_schema` queries
every engine answers. `PostgresqlRowMapper` adds the PostgreSQL-only
fragments (enums, composite types, materialized views, partitions).

Mappers know column names, never SQL. A missing or malformed field raises
CatalogAccessError from the row accessor and is not caught here.
"""

from __future__ import annotations

import logging
from typing import Iterable

from dbdoc.core.logs import clean
from dbdoc.core.models import (
    Column,
    ColumnKey,
    CompositeField,
    Constraint,
    DbCompositeType,
    DbEnum,
    ForeignKey,
    MaterializedView,
    PrimaryKey,
    ReferentialAction,
    Table,
    UdtReference,
    View,
    sort_constraints,
)
from dbdoc.core.rows import Row

logger = logging.getLogger(__name__)

_REFERENTIAL_ACTIONS = {
    "NO ACTION": ReferentialAction.NO_ACTION,
    "RESTRICT": ReferentialAction.RESTRICT,
    "CASCADE": ReferentialAction.CASCADE,
    "SET NULL": ReferentialAction.SET_NULL,
    "SET DEFAULT": ReferentialAction.SET_DEFAULT,
}


def decode_referential_action(value: str | None) -> ReferentialAction:
    """
    Decode a catalog rule string such as `SET NULL` into a ReferentialAction.

    NULL decodes to NO_ACTION. An unrecognized string is logged and also
    decodes to NO_ACTION; it never aborts the load.
    """
    if value is None:
        return ReferentialAction.NO_ACTION
    action = _REFERENTIAL_ACTIONS.get(value.strip().upper())
    if action is None:
        logger.warning(
            "Unknown referential action '%s', defaulting to NO_ACTION", clean(value)
        )
        return ReferentialAction.NO_ACTION
    return action


def resolve_data_type(
    data_type: str, numeric_precision: int | None, numeric_scale: int | None
) -> str:
    """`numeric` with both precision and scale becomes `numeric(p,s)`."""
    if (
        data_type == "numeric"
        and numeric_precision is not None
        and numeric_scale is not None
    ):
        return f"numeric({numeric_precision},{numeric_scale})"
    return data_type


def build_constraints(row: Row) -> tuple[Constraint, ...]:
    """Derive column constraints from catalog flags, in display order."""
    found: list[Constraint] = []
    if row.boolean("is_unique"):
        found.append(Constraint.UNIQUE)
    if (row.optional_string("check_constraint") or "").strip():
        found.append(Constraint.CHECK)
    if (row.optional_string("column_default") or "").strip():
        found.append(Constraint.DEFAULT)
    if row.boolean("is_auto_increment"):
        found.append(Constraint.AUTO_INCREMENT)
    if row.optional_string("is_nullable") == "YES":
        found.append(Constraint.NULLABLE)
    if row.optional_string("is_generated") == "ALWAYS":
        found.append(Constraint.GENERATED)
    return sort_constraints(found)


class RowMapper:
    """Maps rows of the engine-agnostic catalog queries."""

    def map_tables(self, rows: Iterable[Row]) -> list[Table]:
        return [
            Table(
                name=row.string("table_name"),
                partition_key=row.optional_string("partition_key"),
            )
            for row in rows
        ]

    def map_views(self, rows: Iterable[Row]) -> list[View]:
        return [View(name=row.string("table_name")) for row in rows]

    def map_columns(self, rows: Iterable[Row]) -> list[Column]:
        return [self.map_column(row) for row in rows]

    def map_column(self, row: Row) -> Column:
        data_type = resolve_data_type(
            row.string("data_type"),
            row.optional_integer("numeric_precision"),
            row.optional_integer("numeric_scale"),
        )
        return Column(
            name=row.string("column_name"),
            data_type=data_type,
            maximum_length=row.integer("character_maximum_length"),
            constraints=build_constraints(row),
            composite_unique_constraint_name=row.optional_string(
                "composite_unique_constraint_name"
            ),
        )

    def map_primary_key(self, rows: Iterable[Row]) -> PrimaryKey | None:
        constraint_name: str | None = None
        column_names: list[str] = []
        for row in rows:
            if constraint_name is None:
                constraint_name = row.string("constraint_name")
            column_names.append(row.string("column_name"))
        if constraint_name is None:
            return None
        return PrimaryKey(constraint_name=constraint_name, column_names=column_names)

    def map_foreign_keys(self, rows: Iterable[Row]) -> list[ForeignKey]:
        return [
            ForeignKey(
                name=row.string("constraint_name"),
                source_table=row.string("source_table_name"),
                source_column=row.string("source_column"),
                target_table=row.string("referenced_table"),
                target_column=row.string("referenced_column"),
                referenced_schema=row.string("referenced_schema"),
                on_delete=decode_referential_action(row.optional_string("on_delete_type")),
                on_update=decode_referential_action(row.optional_string("on_update_type")),
            )
            for row in rows
        ]

    def map_column_udt_mappings(
        self, rows: Iterable[Row]
    ) -> dict[ColumnKey, UdtReference]:
        mappings: dict[ColumnKey, UdtReference] = {}
        for row in rows:
            key = ColumnKey(row.string("table_name"), row.string("column_name"))
            mappings[key] = UdtReference(row.string("udt_schema"), row.string("udt_name"))
        return mappings

    def map_enum_info(self, rows: Iterable[Row]) -> list[DbEnum]:
        raise NotImplementedError(f"{type(self).__name__} does not map enums")

    def map_enum_values(self, rows: Iterable[Row]) -> list[str]:
        raise NotImplementedError(f"{type(self).__name__} does not map enum values")

    def map_composite_types(self, rows: Iterable[Row]) -> list[DbCompositeType]:
        raise NotImplementedError(f"{type(self).__name__} does not map composite types")

    def map_materialized_views(self, rows: Iterable[Row]) -> list[MaterializedView]:
        raise NotImplementedError(
            f"{type(self).__name__} does not map materialized views"
        )

    def map_partition_children(self, rows: Iterable[Row]) -> dict[str, list[str]]:
        raise NotImplementedError(f"{type(self).__name__} does not map partitions")


class PostgresqlRowMapper(RowMapper):
    """Adds the PostgreSQL catalog fragments."""

    def map_enum_info(self, rows: Iterable[Row]) -> list[DbEnum]:
        return [
            DbEnum(schema_name=row.string("udt_schema"), enum_name=row.string("udt_name"))
            for row in rows
        ]

    def map_enum_values(self, rows: Iterable[Row]) -> list[str]:
        return [row.string("enumlabel") for row in rows]

    def map_composite_types(self, rows: Iterable[Row]) -> list[DbCompositeType]:
        # One row per attribute; a type without attributes still yields one row
        # with NULL attribute columns.
        grouped: dict[tuple[str, str], list[CompositeField]] = {}
        for row in rows:
            key = (row.string("schema_name"), row.string("type_name"))
            fields = grouped.setdefault(key, [])
            attribute_name = row.optional_string("attribute_name")
            if attribute_name is None:
                continue
            fields.append(
                CompositeField(
                    field_name=attribute_name,
                    field_type=row.string("attribute_type"),
                    position=row.integer("attribute_position"),
                )
            )
        return [
            DbCompositeType(schema_name=schema, type_name=name, fields=fields)
            for (schema, name), fields in grouped.items()
        ]

    def map_materialized_views(self, rows: Iterable[Row]) -> list[MaterializedView]:
        return [MaterializedView(name=row.string("table_name")) for row in rows]

    def map_partition_children(self, rows: Iterable[Row]) -> dict[str, list[str]]:
        children: dict[str, list[str]] = {}
        for row in rows:
            children.setdefault(row.string("table_name"), []).append(
                row.string("partition_name")
            )
        return children
