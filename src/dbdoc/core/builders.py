"""Per-object builders.

Each builder fetches the stubs for one object kind, fetches their dependent
data (columns, keys) and merges everything into finished aggregates. Enums
and composite types must be built first: column mapping resolves
user-defined types against the lookup built from them.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from dbdoc.core.logs import clean
from dbdoc.core.models import (
    ColumnKey,
    DbCompositeType,
    DbEnum,
    MaterializedView,
    Table,
    TypeKey,
    UdtReference,
    View,
)
from dbdoc.core.queries import CatalogQueryRunner
from dbdoc.core.resolution import (
    TypeDefinition,
    TypeResolutionContext,
    enrich_with_foreign_key_constraints,
    enrich_with_nullability,
    map_user_defined_types,
)

logger = logging.getLogger(__name__)


def build_enums(runner: CatalogQueryRunner, schema: str) -> list[DbEnum]:
    """Return the schema's enums with their labels in declaration order."""
    enums: list[DbEnum] = []
    for stub in runner.get_enum_info(schema):
        values = runner.get_enum_values(stub.schema_name, stub.enum_name)
        enums.append(
            DbEnum(
                schema_name=stub.schema_name,
                enum_name=stub.enum_name,
                enum_values=values,
            )
        )
    return enums


def build_composite_types(
    runner: CatalogQueryRunner, schema: str
) -> list[DbCompositeType]:
    return runner.get_composite_type_info(schema)


def build_type_lookup(
    enums: Iterable[DbEnum], composite_types: Iterable[DbCompositeType]
) -> dict[TypeKey, TypeDefinition]:
    """Index enums and composite types by (schema, type name)."""
    lookup: dict[TypeKey, TypeDefinition] = {}
    for enum in enums:
        lookup[TypeKey(enum.schema_name, enum.enum_name)] = enum
    for composite in composite_types:
        lookup[TypeKey(composite.schema_name, composite.type_name)] = composite
    return lookup


def build_tables(
    runner: CatalogQueryRunner,
    schema: str,
    types_by_key: Mapping[TypeKey, TypeDefinition],
    udt_mappings: Mapping[ColumnKey, UdtReference],
) -> list[Table]:
    """
    Build every base table of a schema.

    Per table: columns, UDT resolution, primary key, foreign keys, foreign-key
    nullability, then FK markers on the source columns.
    """
    stubs = runner.get_table_info(schema)
    partitions = runner.get_partition_children(schema)

    tables: list[Table] = []
    for stub in stubs:
        context = TypeResolutionContext(
            column_udt_mappings=udt_mappings,
            types_by_key=types_by_key,
            table_name=stub.name,
            schema=schema,
        )
        columns = map_user_defined_types(
            runner.get_column_info(schema, stub.name), context
        )
        primary_key = runner.get_primary_key_info(schema, stub.name)
        foreign_keys = enrich_with_nullability(
            runner.get_foreign_key_info(schema, stub.name), columns
        )
        columns = enrich_with_foreign_key_constraints(columns, foreign_keys)

        tables.append(
            Table(
                name=stub.name,
                columns=columns,
                primary_key=primary_key,
                foreign_keys=foreign_keys,
                partition_key=stub.partition_key,
                partition_names=partitions.get(stub.name, ()),
            )
        )
        logger.debug(
            "Built table %s.%s (%d columns, %d foreign keys)",
            clean(schema),
            clean(stub.name),
            len(columns),
            len(foreign_keys),
        )
    return tables


def build_views(
    runner: CatalogQueryRunner,
    schema: str,
    types_by_key: Mapping[TypeKey, TypeDefinition],
    udt_mappings: Mapping[ColumnKey, UdtReference],
) -> list[View]:
    views: list[View] = []
    for stub in runner.get_view_info(schema):
        context = TypeResolutionContext(udt_mappings, types_by_key, stub.name, schema)
        columns = map_user_defined_types(
            runner.get_column_info(schema, stub.name), context
        )
        views.append(View(name=stub.name, columns=columns))
    return views


def build_materialized_views(
    runner: CatalogQueryRunner,
    schema: str,
    types_by_key: Mapping[TypeKey, TypeDefinition],
    udt_mappings: Mapping[ColumnKey, UdtReference],
) -> list[MaterializedView]:
    # information_schema.columns has no rows for materialized views, so they
    # have their own column query.
    views: list[MaterializedView] = []
    for stub in runner.get_materialized_view_info(schema):
        context = TypeResolutionContext(udt_mappings, types_by_key, stub.name, schema)
        columns = map_user_defined_types(
            runner.get_materialized_view_column_info(schema, stub.name), context
        )
        views.append(MaterializedView(name=stub.name, columns=columns))
    return views
