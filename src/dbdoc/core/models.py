"""Core domain models for database catalog metadata.

These models represent schema objects (tables, views, types, keys) in a
simple, immutable form. They are free of driver types and rendering
concerns. Each model validates its required fields on construction and
stores sequences as tuples, so a fully built Schema is a read-only
object graph.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

from dbdoc.core.validation import (
    ValidationError,
    contains_at_least_one_item,
    is_not_blank,
    is_not_none,
    is_positive,
)

USER_DEFINED = "USER-DEFINED"


def _freeze(obj: object, name: str, items: Iterable | None) -> None:
    """Store an iterable attribute as a tuple on a frozen dataclass."""
    is_not_none(items, name)
    object.__setattr__(obj, name, tuple(items))


class Constraint(Enum):
    """
    Column-level constraint markers.

    The value of each member is its display priority: when a column carries
    several constraints they are always shown in ascending priority order,
    regardless of the order in which they were discovered.
    """

    FK = 0
    UNIQUE = 1
    AUTO_INCREMENT = 2
    DEFAULT = 3
    CHECK = 4
    NULLABLE = 5
    GENERATED = 6

    @property
    def display_priority(self) -> int:
        return self.value


def sort_constraints(constraints: Iterable[Constraint]) -> tuple[Constraint, ...]:
    """Return constraints ordered by display priority."""
    return tuple(sorted(constraints, key=lambda c: c.display_priority))


class ReferentialAction(str, Enum):
    """
    Action applied to dependent rows when a referenced row changes.

    Values:
        NO_ACTION: Default; the check is deferred to the end of the statement.
        RESTRICT: Reject the change immediately if dependent rows exist.
        CASCADE: Propagate the delete/update to dependent rows.
        SET_NULL: Set the referencing columns to NULL.
        SET_DEFAULT: Set the referencing columns to their default values.
    """

    NO_ACTION = "NO_ACTION"
    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"
    SET_NULL = "SET_NULL"
    SET_DEFAULT = "SET_DEFAULT"

    @property
    def display_name(self) -> str:
        """Human-readable form, e.g. `SET NULL`."""
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class Column:
    """
    A column of a table, view or materialized view.

    Attributes:
        name: Column name.
        data_type: Resolved data-type label (e.g. `varchar`, `numeric(10,2)`,
            `order_status`, `core.order_status`).
        maximum_length: Character maximum length, 0 when not applicable.
        constraints: Constraints on the column.
        composite_unique_constraint_name: Name of a multi-column UNIQUE
            constraint this column takes part in, if any.
    """

    name: str
    data_type: str
    maximum_length: int = 0
    constraints: tuple[Constraint, ...] = ()
    composite_unique_constraint_name: str | None = None

    def __post_init__(self) -> None:
        is_not_blank(self.name, "name")
        is_not_blank(self.data_type, "data_type")
        _freeze(self, "constraints", self.constraints)
        if self.maximum_length is None or self.maximum_length < 0:
            object.__setattr__(self, "maximum_length", 0)

    @property
    def is_nullable(self) -> bool:
        return Constraint.NULLABLE in self.constraints

    def with_data_type(self, data_type: str) -> Column:
        """Return a copy of this column with a different data type."""
        return replace(self, data_type=data_type)


@dataclass(frozen=True)
class PrimaryKey:
    """Primary key of a table. More than one column means a composite key."""

    constraint_name: str
    column_names: tuple[str, ...]

    def __post_init__(self) -> None:
        is_not_blank(self.constraint_name, "constraint_name")
        contains_at_least_one_item(self.column_names, "column_names")
        _freeze(self, "column_names", self.column_names)
        for column_name in self.column_names:
            is_not_blank(column_name, "column_names")

    @property
    def is_composite(self) -> bool:
        return len(self.column_names) > 1


@dataclass(frozen=True)
class ForeignKey:
    """
    A single (source column -> target column) pair of a foreign key constraint.

    Foreign keys are read from the catalog before the owning table's columns
    are known, so `is_nullable` starts out False and is enriched afterwards.
    """

    name: str
    source_table: str
    source_column: str
    target_table: str
    target_column: str
    referenced_schema: str
    is_nullable: bool = False
    on_delete: ReferentialAction = ReferentialAction.NO_ACTION
    on_update: ReferentialAction = ReferentialAction.NO_ACTION

    def __post_init__(self) -> None:
        is_not_blank(self.name, "name")
        is_not_blank(self.source_table, "source_table")
        is_not_blank(self.source_column, "source_column")
        is_not_blank(self.target_table, "target_table")
        is_not_blank(self.target_column, "target_column")
        is_not_blank(self.referenced_schema, "referenced_schema")
        is_not_none(self.on_delete, "on_delete")
        is_not_none(self.on_update, "on_update")

    def with_nullability(self, is_nullable: bool) -> ForeignKey:
        """Return a copy with `is_nullable` set; every other field is kept."""
        return replace(self, is_nullable=is_nullable)


@dataclass(frozen=True)
class Table:
    """
    A base table.

    Attributes:
        name: Table name.
        columns: Columns in ordinal order.
        primary_key: Primary key, or None if the table has none.
        foreign_keys: Foreign key pairs in catalog order.
        partition_key: Partition key expression (e.g. `RANGE (created_at)`),
            only set for partitioned tables.
        partition_names: Child partitions of a partitioned table.
    """

    name: str
    columns: tuple[Column, ...] = ()
    primary_key: PrimaryKey | None = None
    foreign_keys: tuple[ForeignKey, ...] = ()
    partition_key: str | None = None
    partition_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        is_not_blank(self.name, "name")
        _freeze(self, "columns", self.columns)
        _freeze(self, "foreign_keys", self.foreign_keys)
        _freeze(self, "partition_names", self.partition_names)
        if self.partition_key is not None and not self.partition_key.strip():
            object.__setattr__(self, "partition_key", None)

    @property
    def primary_key_columns(self) -> tuple[str, ...]:
        return self.primary_key.column_names if self.primary_key else ()

    @property
    def is_partitioned(self) -> bool:
        return self.partition_key is not None


@dataclass(frozen=True)
class View:
    """A regular view. Views carry no primary or foreign keys."""

    name: str
    columns: tuple[Column, ...] = ()

    def __post_init__(self) -> None:
        is_not_blank(self.name, "name")
        _freeze(self, "columns", self.columns)


@dataclass(frozen=True)
class MaterializedView:
    """A materialized view. Like views, these carry no primary or foreign keys."""

    name: str
    columns: tuple[Column, ...] = ()

    def __post_init__(self) -> None:
        is_not_blank(self.name, "name")
        _freeze(self, "columns", self.columns)


@dataclass(frozen=True)
class DbEnum:
    """An enumerated type and its labels in declaration order."""

    schema_name: str
    enum_name: str
    enum_values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        is_not_blank(self.schema_name, "schema_name")
        is_not_blank(self.enum_name, "enum_name")
        _freeze(self, "enum_values", self.enum_values)


@dataclass(frozen=True)
class CompositeField:
    """A single attribute of a composite type; `position` is 1-based."""

    field_name: str
    field_type: str
    position: int

    def __post_init__(self) -> None:
        is_not_blank(self.field_name, "field_name")
        is_not_blank(self.field_type, "field_type")
        is_positive(self.position, "position")


@dataclass(frozen=True)
class DbCompositeType:
    """A composite type and its fields in position order."""

    schema_name: str
    type_name: str
    fields: tuple[CompositeField, ...] = ()

    def __post_init__(self) -> None:
        is_not_blank(self.schema_name, "schema_name")
        is_not_blank(self.type_name, "type_name")
        _freeze(self, "fields", self.fields)


@dataclass(frozen=True)
class Schema:
    """
    A fully built schema.

    Enums and composite types behave as sets keyed by type name; a duplicate
    definition is a mapping defect and fails validation.
    """

    name: str
    tables: tuple[Table, ...] = ()
    views: tuple[View, ...] = ()
    materialized_views: tuple[MaterializedView, ...] = ()
    db_enums: tuple[DbEnum, ...] = ()
    composite_types: tuple[DbCompositeType, ...] = ()

    def __post_init__(self) -> None:
        is_not_blank(self.name, "name")
        _freeze(self, "tables", self.tables)
        _freeze(self, "views", self.views)
        _freeze(self, "materialized_views", self.materialized_views)
        _freeze(self, "db_enums", self.db_enums)
        _freeze(self, "composite_types", self.composite_types)

        enum_keys = [(e.schema_name, e.enum_name) for e in self.db_enums]
        if len(set(enum_keys)) != len(enum_keys):
            raise ValidationError("db_enums must not contain duplicates")
        type_keys = [(t.schema_name, t.type_name) for t in self.composite_types]
        if len(set(type_keys)) != len(type_keys):
            raise ValidationError("composite_types must not contain duplicates")

    @property
    def foreign_keys(self) -> list[ForeignKey]:
        """All foreign keys of all tables, in table order."""
        return [fk for table in self.tables for fk in table.foreign_keys]


@dataclass(frozen=True)
class ColumnKey:
    """Lookup key for a column within the schema being built."""

    table_name: str
    column_name: str


@dataclass(frozen=True)
class TypeKey:
    """Lookup key for a user-defined type definition."""

    schema_name: str
    type_name: str


@dataclass(frozen=True)
class UdtReference:
    """The user-defined type a column points at; may live in another schema."""

    udt_schema: str
    udt_name: str

    @property
    def key(self) -> TypeKey:
        return TypeKey(self.udt_schema, self.udt_name)
