"""Catalog query identities and the runner that maps their results.

A `QueryExecutor` turns a query identity plus 0-2 string parameters
(schema, then optionally an object name) into rows. It knows nothing about
the domain model. `CatalogQueryRunner` pairs an executor with a row mapper
and exposes one method per catalog fetch used by the builders.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Protocol

from dbdoc.core.logs import clean
from dbdoc.core.models import (
    Column,
    ColumnKey,
    DbCompositeType,
    DbEnum,
    ForeignKey,
    MaterializedView,
    PrimaryKey,
    Table,
    UdtReference,
    View,
)
from dbdoc.core.rows import Row

if TYPE_CHECKING:
    from dbdoc.core.mappers import RowMapper

logger = logging.getLogger(__name__)


class QueryId(str, Enum):
    """The fixed set of catalog queries an executor must answer."""

    TABLE_INFO = "table-info"
    COLUMN_INFO = "column-info"
    PRIMARY_KEY_INFO = "primary-key-info"
    FOREIGN_KEY_INFO = "foreign-key-info"
    VIEW_INFO = "view-info"
    ENUM_INFO = "enum-info"
    ENUM_VALUES = "enum-values"
    COMPOSITE_TYPE_INFO = "composite-type-info"
    MATERIALIZED_VIEW_INFO = "materialized-view-info"
    MATERIALIZED_VIEW_COLUMN_INFO = "materialized-view-column-info"
    PARTITION_CHILDREN = "partition-children"
    COLUMN_UDT_MAPPINGS = "column-udt-mappings"


class QueryExecutor(Protocol):
    """Runs a catalog query and returns its rows; failures raise CatalogAccessError."""

    def execute(self, query_id: QueryId, *params: str) -> Iterable[Row]: ...


class CatalogQueryRunner:
    """Fetches catalog fragments for one schema session."""

    def __init__(self, executor: QueryExecutor, mapper: RowMapper) -> None:
        self.executor = executor
        self.mapper = mapper

    def _rows(self, query_id: QueryId, *params: str) -> list[Row]:
        return list(self.executor.execute(query_id, *params))

    def get_table_info(self, schema: str) -> list[Table]:
        tables = self.mapper.map_tables(self._rows(QueryId.TABLE_INFO, schema))
        logger.debug("Found %d tables in schema %s", len(tables), clean(schema))
        return tables

    def get_column_info(self, schema: str, table: str) -> list[Column]:
        return self.mapper.map_columns(self._rows(QueryId.COLUMN_INFO, schema, table))

    def get_primary_key_info(self, schema: str, table: str) -> PrimaryKey | None:
        return self.mapper.map_primary_key(
            self._rows(QueryId.PRIMARY_KEY_INFO, schema, table)
        )

    def get_foreign_key_info(self, schema: str, table: str) -> list[ForeignKey]:
        return self.mapper.map_foreign_keys(
            self._rows(QueryId.FOREIGN_KEY_INFO, schema, table)
        )

    def get_view_info(self, schema: str) -> list[View]:
        views = self.mapper.map_views(self._rows(QueryId.VIEW_INFO, schema))
        logger.debug("Found %d views in schema %s", len(views), clean(schema))
        return views

    def get_enum_info(self, schema: str) -> list[DbEnum]:
        enums = self.mapper.map_enum_info(self._rows(QueryId.ENUM_INFO, schema))
        logger.debug("Found %d enums in schema %s", len(enums), clean(schema))
        return enums

    def get_enum_values(self, schema: str, enum_name: str) -> list[str]:
        return self.mapper.map_enum_values(
            self._rows(QueryId.ENUM_VALUES, schema, enum_name)
        )

    def get_column_udt_mappings(self, schema: str) -> dict[ColumnKey, UdtReference]:
        return self.mapper.map_column_udt_mappings(
            self._rows(QueryId.COLUMN_UDT_MAPPINGS, schema)
        )

    def get_composite_type_info(self, schema: str) -> list[DbCompositeType]:
        types = self.mapper.map_composite_types(
            self._rows(QueryId.COMPOSITE_TYPE_INFO, schema)
        )
        logger.debug("Found %d composite types in schema %s", len(types), clean(schema))
        return types

    def get_materialized_view_info(self, schema: str) -> list[MaterializedView]:
        views = self.mapper.map_materialized_views(
            self._rows(QueryId.MATERIALIZED_VIEW_INFO, schema)
        )
        logger.debug(
            "Found %d materialized views in schema %s", len(views), clean(schema)
        )
        return views

    def get_materialized_view_column_info(self, schema: str, view: str) -> list[Column]:
        return self.mapper.map_columns(
            self._rows(QueryId.MATERIALIZED_VIEW_COLUMN_INFO, schema, view)
        )

    def get_partition_children(self, schema: str) -> dict[str, list[str]]:
        return self.mapper.map_partition_children(
            self._rows(QueryId.PARTITION_CHILDREN, schema)
        )
