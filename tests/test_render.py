from dbdoc.core.models import (
    Column,
    CompositeField,
    Constraint,
    DbCompositeType,
    DbEnum,
    ForeignKey,
    MaterializedView,
    PrimaryKey,
    ReferentialAction,
    Schema,
    Table,
    View,
)
from dbdoc.core.render import PumlRenderer, render_puml


def _schema() -> Schema:
    users = Table(
        name="users",
        columns=[Column("id", "uuid"), Column("email", "varchar", constraints=[Constraint.UNIQUE])],
        primary_key=PrimaryKey("users_pkey", ["id"]),
    )
    orders = Table(
        name="orders",
        columns=[
            Column("id", "uuid"),
            Column("user_id", "uuid", constraints=[Constraint.FK, Constraint.NULLABLE]),
        ],
        primary_key=PrimaryKey("orders_pkey", ["id"]),
        foreign_keys=[
            ForeignKey("orders_user_fk", "orders", "user_id", "users", "id", "core",
                       is_nullable=True, on_delete=ReferentialAction.CASCADE),
        ],
    )
    return Schema(
        name="core",
        tables=[users, orders],
        views=[View("active_users", [Column("id", "uuid")])],
        materialized_views=[MaterializedView("order_totals", [Column("total", "numeric(12,2)")])],
        db_enums=[DbEnum("core", "order_status", ["PENDING", "SHIPPED"])],
        composite_types=[DbCompositeType("core", "address", [CompositeField("street", "text", 1)])],
    )


def test_render_full_document():
    expected = (
        "@startuml\nhide methods\nhide stereotypes\n\n"
        'package "core" {\n'
        '\tentity "order_status" <<enum>> {\n\t\tPENDING\n\t\tSHIPPED\n\t}\n\n'
        '\tentity "address" <<composite>> {\n\t\tstreet : text\n\t}\n\n'
        '\tentity "active_users" <<view>> {\n\t\tid: uuid\n\t}\n\n'
        '\tentity "order_totals" <<materialized_view>> {\n\t\ttotal: numeric(12,2)\n\t}\n\n'
        '\tentity "users" {\n\t\t**id: uuid**\n\t\t--\n\t\temail: varchar <<UNIQUE>>\n\t}\n\n'
        '\tentity "orders" {\n\t\t**id: uuid**\n\t\t--\n\t\tuser_id: uuid <<FK,NULLABLE>>\n\t}\n\n'
        "}\n\n"
        'users ||--o{ orders : "ON DELETE CASCADE"\n\n'
        "@enduml\n"
    )
    assert render_puml([_schema()]) == expected


def test_render_table_without_separator_when_only_primary_key():
    table = Table("tags", [Column("id", "uuid")], primary_key=PrimaryKey("pk", ["id"]))
    assert PumlRenderer().render_table(table) == '\tentity "tags" {\n\t\t**id: uuid**\n\t}\n'


def test_render_table_primary_key_columns_first():
    table = Table(
        "items",
        [Column("note", "text"), Column("id", "uuid")],
        primary_key=PrimaryKey("pk", ["id"]),
    )
    assert PumlRenderer().render_table(table) == (
        '\tentity "items" {\n\t\t**id: uuid**\n\t\t--\n\t\tnote: text\n\t}\n'
    )


def test_render_partitioned_table():
    table = Table(
        "events",
        [Column("created_at", "timestamp")],
        partition_key="RANGE (created_at)",
        partition_names=["events_2024", "events_2025"],
    )
    assert PumlRenderer().render_table(table) == (
        '\tentity "events" <<partitioned: RANGE (created_at)>> {\n'
        "\t\tcreated_at: timestamp\n"
        "\t}\n"
        "\t' Partitions: events_2024, events_2025\n"
    )


def test_relationships_grouped_by_sorted_target():
    fks = [
        ForeignKey("fk1", "orders", "user_id", "users", "id", "core"),
        ForeignKey("fk2", "items", "order_id", "orders", "id", "core"),
        ForeignKey("fk3", "reviews", "user_id", "users", "id", "core"),
    ]
    schema = Schema(
        name="core",
        tables=[Table("orders", foreign_keys=fks[:1]), Table("items", foreign_keys=fks[1:2]),
                Table("reviews", foreign_keys=fks[2:])],
    )
    assert PumlRenderer().render_relationships(schema) == (
        "orders ||--|{ items\n\n"
        "users ||--|{ orders\n"
        "users ||--|{ reviews\n\n"
    )


def test_render_empty_schema():
    assert render_puml([Schema("empty")]) == (
        '@startuml\nhide methods\nhide stereotypes\n\npackage "empty" {\n}\n\n@enduml\n'
    )
