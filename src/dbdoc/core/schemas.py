"""Schema assembler: builds one Schema aggregate per requested schema name."""

from __future__ import annotations

import logging
from typing import Callable, ContextManager, Sequence

from dbdoc.core.builders import (
    build_composite_types,
    build_enums,
    build_materialized_views,
    build_tables,
    build_type_lookup,
    build_views,
)
from dbdoc.core.logs import clean
from dbdoc.core.mappers import PostgresqlRowMapper
from dbdoc.core.models import Schema
from dbdoc.core.queries import CatalogQueryRunner, QueryExecutor
from dbdoc.core.validation import contains_at_least_one_item, is_not_blank

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ContextManager[QueryExecutor]]
RunnerFactory = Callable[[QueryExecutor], CatalogQueryRunner]


class SchemaBuildError(RuntimeError):
    """Raised when a schema cannot be built; the cause is chained."""

    def __init__(self, schema_name: str, message: str | None = None) -> None:
        self.schema_name = schema_name
        super().__init__(message or f"Failed to build schema '{schema_name}'")


def postgresql_runner(executor: QueryExecutor) -> CatalogQueryRunner:
    return CatalogQueryRunner(executor, PostgresqlRowMapper())


def build_schema(runner: CatalogQueryRunner, schema_name: str) -> Schema:
    """Build a single schema over an open session, in dependency order."""
    enums = build_enums(runner, schema_name)
    composite_types = build_composite_types(runner, schema_name)
    types_by_key = build_type_lookup(enums, composite_types)
    udt_mappings = runner.get_column_udt_mappings(schema_name)

    tables = build_tables(runner, schema_name, types_by_key, udt_mappings)
    views = build_views(runner, schema_name, types_by_key, udt_mappings)
    materialized_views = build_materialized_views(
        runner, schema_name, types_by_key, udt_mappings
    )

    return Schema(
        name=schema_name,
        tables=tables,
        views=views,
        materialized_views=materialized_views,
        db_enums=enums,
        composite_types=composite_types,
    )


def build_schemas(
    session_factory: SessionFactory,
    schema_names: Sequence[str],
    *,
    runner_factory: RunnerFactory = postgresql_runner,
) -> list[Schema]:
    """
    Build every requested schema, in order.

    Each schema gets its own session, which is closed before the next schema
    starts, also when the build fails. Any failure aborts the whole request
    with SchemaBuildError naming the schema; no partial list is returned.

    Args:
        session_factory: Returns a context manager yielding a QueryExecutor.
        schema_names: Non-empty ordered schema names.
        runner_factory: Pairs an executor with a row mapper for the engine.

    Returns:
        Schemas in the order requested.
    """
    contains_at_least_one_item(schema_names, "schema_names")
    for name in schema_names:
        is_not_blank(name, "schema_names")

    schemas: list[Schema] = []
    for schema_name in schema_names:
        logger.info("Building schema %s", clean(schema_name))
        try:
            with session_factory() as executor:
                schema = build_schema(runner_factory(executor), schema_name)
        except Exception as exc:
            logger.error("Failed to build schema %s: %s", clean(schema_name), clean(exc))
            raise SchemaBuildError(schema_name) from exc
        logger.info(
            "Built schema %s: %d tables, %d views, %d materialized views",
            clean(schema_name),
            len(schema.tables),
            len(schema.views),
            len(schema.materialized_views),
        )
        schemas.append(schema)
    return schemas
