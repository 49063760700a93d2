import logging

import pytest

from dbdoc.core.models import (
    USER_DEFINED,
    Column,
    ColumnKey,
    Constraint,
    DbEnum,
    ForeignKey,
    ReferentialAction,
    TypeKey,
    UdtReference,
)
from dbdoc.core.resolution import (
    TypeResolutionContext,
    enrich_with_foreign_key_constraints,
    enrich_with_nullability,
    map_user_defined_types,
)

ORDER_STATUS = DbEnum("core", "order_status", ["PENDING", "SHIPPED"])
TYPES = {TypeKey("core", "order_status"): ORDER_STATUS}


def _context(table: str, schema: str, mappings=None) -> TypeResolutionContext:
    if mappings is None:
        mappings = {ColumnKey(table, "status"): UdtReference("core", "order_status")}
    return TypeResolutionContext(mappings, TYPES, table, schema)


def test_same_schema_reference_resolves_to_bare_name():
    column = Column("status", USER_DEFINED)
    assert _context("orders", "core").resolve(column).data_type == "order_status"


def test_cross_schema_reference_is_qualified():
    column = Column("status", USER_DEFINED)
    assert _context("orders", "sales").resolve(column).data_type == "core.order_status"


def test_missing_reference_keeps_placeholder(caplog):
    column = Column("status", USER_DEFINED)
    with caplog.at_level(logging.WARNING, logger="dbdoc.core.resolution"):
        resolved = _context("orders", "core", mappings={}).resolve(column)
    assert resolved.data_type == USER_DEFINED
    assert "orders" in caplog.text


def test_non_placeholder_columns_are_untouched():
    column = Column("status", "text")
    assert _context("orders", "core").resolve(column) is column


def test_unknown_same_schema_type_is_resolved_and_logged(caplog):
    mappings = {ColumnKey("orders", "status"): UdtReference("core", "mystery")}
    with caplog.at_level(logging.WARNING, logger="dbdoc.core.resolution"):
        resolved = _context("orders", "core", mappings).resolve(Column("status", USER_DEFINED))
    assert resolved.data_type == "mystery"
    assert "mystery" in caplog.text


def test_resolution_keeps_other_column_fields():
    column = Column("status", USER_DEFINED, constraints=[Constraint.NULLABLE])
    (resolved,) = map_user_defined_types([column], _context("orders", "core"))
    assert resolved.constraints == (Constraint.NULLABLE,)
    assert resolved.name == "status"


def _fk(source_column: str = "user_id") -> ForeignKey:
    return ForeignKey(
        name="fk_orders_user",
        source_table="orders",
        source_column=source_column,
        target_table="users",
        target_column="id",
        referenced_schema="core",
        on_delete=ReferentialAction.CASCADE,
        on_update=ReferentialAction.SET_NULL,
    )


@pytest.mark.parametrize(
    ("constraints", "expected"),
    [([Constraint.NULLABLE], True), ([], False)],
)
def test_enrich_with_nullability_copies_column_nullability(constraints, expected):
    columns = [Column("USER_ID", "uuid", constraints=constraints)]
    (fk,) = enrich_with_nullability([_fk()], columns)
    assert fk.is_nullable is expected


def test_enrich_with_nullability_unmatched_column_keeps_key():
    original = _fk("missing_col")
    (fk,) = enrich_with_nullability([original], [Column("user_id", "uuid")])

    assert fk.is_nullable is False
    assert fk.on_delete is ReferentialAction.CASCADE
    assert fk.on_update is ReferentialAction.SET_NULL
    assert fk == original


@pytest.mark.parametrize(("source_column", "expected"), [("id", True), ("ID", False)])
def test_enrich_with_nullability_prefers_exact_name(source_column, expected):
    columns = [
        Column("id", "uuid", constraints=[Constraint.NULLABLE]),
        Column("ID", "uuid"),
    ]
    (fk,) = enrich_with_nullability([_fk(source_column)], columns)
    assert fk.is_nullable is expected


def test_enrich_with_nullability_takes_first_case_insensitive_match():
    columns = [
        Column("User_Id", "uuid", constraints=[Constraint.NULLABLE]),
        Column("USER_ID", "uuid"),
    ]
    (fk,) = enrich_with_nullability([_fk()], columns)
    assert fk.is_nullable is True


def test_enrich_with_foreign_key_constraints_prepends_fk():
    columns = [
        Column("id", "uuid"),
        Column("User_Id", "uuid", constraints=[Constraint.UNIQUE, Constraint.NULLABLE]),
    ]
    enriched = enrich_with_foreign_key_constraints(columns, [_fk()])

    assert enriched[0].constraints == ()
    assert enriched[1].constraints == (Constraint.FK, Constraint.UNIQUE, Constraint.NULLABLE)


def test_enrich_with_foreign_key_constraints_never_duplicates():
    columns = [Column("user_id", "uuid", constraints=[Constraint.FK])]
    (column,) = enrich_with_foreign_key_constraints(columns, [_fk(), _fk()])
    assert column.constraints == (Constraint.FK,)
