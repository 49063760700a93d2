import pytest

from dbdoc.core.formatters import (
    EntityLineFormatter,
    cardinality,
    create_entity_line_formatter,
    create_relationship_formatter,
    default_entity_line,
    referential_action,
)
from dbdoc.core.models import (
    Column,
    Constraint,
    ForeignKey,
    PrimaryKey,
    ReferentialAction,
    Table,
    View,
)

USERS = Table(
    name="users",
    columns=[Column("id", "uuid"), Column("email", "varchar", constraints=[Constraint.UNIQUE])],
    primary_key=PrimaryKey("users_pkey", ["id"]),
)


def _fk(nullable=False, on_delete=ReferentialAction.NO_ACTION,
        on_update=ReferentialAction.NO_ACTION, referenced_schema="core"):
    return ForeignKey(
        name="orders_user_fk",
        source_table="orders",
        source_column="user_id",
        target_table="users",
        target_column="id",
        referenced_schema=referenced_schema,
        is_nullable=nullable,
        on_delete=on_delete,
        on_update=on_update,
    )


def test_entity_lines_for_primary_key_and_unique_column():
    fmt = create_entity_line_formatter()
    assert [fmt(USERS, c) for c in USERS.columns] == [
        "**id: uuid**",
        "email: varchar <<UNIQUE>>",
    ]


def test_entity_line_includes_length():
    fmt = create_entity_line_formatter()
    column = Column("name", "character varying", maximum_length=100)
    assert fmt(Table("t"), column) == "name: character varying(100)"


def test_entity_line_constraints_sorted_by_priority():
    fmt = create_entity_line_formatter()
    column = Column(
        "user_id",
        "uuid",
        constraints=[Constraint.NULLABLE, Constraint.FK, Constraint.DEFAULT],
    )
    assert fmt(Table("orders"), column) == "user_id: uuid <<FK,DEFAULT,NULLABLE>>"


def test_entity_line_for_view_columns_has_no_primary_key():
    fmt = create_entity_line_formatter()
    assert fmt(View("v"), Column("id", "uuid")) == "id: uuid"


def test_default_entity_line_passes_existing_value_through():
    assert default_entity_line(USERS, USERS.columns[0], "already") == "already"


def test_entity_formatter_is_idempotent():
    fmt = create_entity_line_formatter()
    column = USERS.columns[1]
    assert fmt(USERS, column) == fmt(USERS, column)


def test_relationship_formatter_is_idempotent():
    fmt = create_relationship_formatter()
    fk = _fk(on_update=ReferentialAction.RESTRICT)
    assert fmt(fk, "core") == fmt(fk, "core")


def test_custom_stage_order():
    fmt = EntityLineFormatter((default_entity_line,))
    assert fmt(USERS, USERS.columns[0]) == "id: uuid"


def test_nullable_cascade_relationship_line():
    fmt = create_relationship_formatter()
    fk = _fk(nullable=True, on_delete=ReferentialAction.CASCADE)
    assert fmt(fk, "core") == 'users ||--o{ orders : "ON DELETE CASCADE"'


def test_required_relationship_without_actions():
    assert create_relationship_formatter()(_fk(), "core") == "users ||--|{ orders"


def test_cross_schema_relationship_is_qualified():
    fk = _fk(referenced_schema="core")
    assert create_relationship_formatter()(fk, "sales") == "core.users ||--|{ sales.orders"


@pytest.mark.parametrize(
    ("on_delete", "on_update", "suffix"),
    [
        (ReferentialAction.CASCADE, ReferentialAction.NO_ACTION, ' : "ON DELETE CASCADE"'),
        (ReferentialAction.NO_ACTION, ReferentialAction.RESTRICT, ' : "ON UPDATE RESTRICT"'),
        (ReferentialAction.NO_ACTION, ReferentialAction.NO_ACTION, ""),
        (ReferentialAction.SET_NULL, ReferentialAction.SET_DEFAULT,
         ' : "ON DELETE SET NULL / ON UPDATE SET DEFAULT"'),
    ],
)
def test_referential_action_suffix(on_delete, on_update, suffix):
    fk = _fk(on_delete=on_delete, on_update=on_update)
    assert referential_action(fk, "anything", "a -- b") == "a -- b" + suffix


def test_cardinality_keeps_surrounding_text():
    assert cardinality(_fk(nullable=True), "core", "x -- y") == "x ||--o{ y"
    assert cardinality(_fk(), "core", "x -- y") == "x ||--|{ y"


def test_cardinality_replaces_every_connector():
    assert cardinality(_fk(), "core", "a -- b -- c") == "a ||--|{ b ||--|{ c"
