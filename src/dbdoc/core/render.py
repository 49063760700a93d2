"""PlantUML rendering of built schemas."""

from __future__ import annotations

import logging
from typing import Iterable

from dbdoc.core.formatters import (
    EntityLineFormatter,
    RelationshipFormatter,
    create_entity_line_formatter,
    create_relationship_formatter,
)
from dbdoc.core.logs import clean
from dbdoc.core.models import (
    DbCompositeType,
    DbEnum,
    ForeignKey,
    MaterializedView,
    Schema,
    Table,
    View,
)

logger = logging.getLogger(__name__)

HEADER = "@startuml\nhide methods\nhide stereotypes\n\n"
FOOTER = "@enduml\n"


class PumlRenderer:
    """
    Renders schemas into a single PlantUML document.

    Each schema becomes a package holding its enums, composite types, views,
    materialized views and tables, in that order. Relationship lines for all
    schemas follow the packages, grouped by target table.
    """

    def __init__(
        self,
        entity_formatter: EntityLineFormatter | None = None,
        relationship_formatter: RelationshipFormatter | None = None,
    ) -> None:
        self.entity_formatter = entity_formatter or create_entity_line_formatter()
        self.relationship_formatter = (
            relationship_formatter or create_relationship_formatter()
        )

    def render(self, schemas: Iterable[Schema]) -> str:
        schemas = list(schemas)
        parts = [HEADER]
        for schema in schemas:
            parts.append(self.render_package(schema))
        for schema in schemas:
            parts.append(self.render_relationships(schema))
        parts.append(FOOTER)
        return "".join(parts)

    def render_package(self, schema: Schema) -> str:
        parts = [f'package "{schema.name}" {{\n']
        parts.extend(self.render_enum(e) + "\n" for e in schema.db_enums)
        parts.extend(self.render_composite_type(t) + "\n" for t in schema.composite_types)
        parts.extend(self.render_view(v) + "\n" for v in schema.views)
        parts.extend(
            self.render_materialized_view(v) + "\n" for v in schema.materialized_views
        )
        parts.extend(self.render_table(t) + "\n" for t in schema.tables)
        parts.append("}\n\n")
        logger.info(
            "Rendered schema %s with %d table(s), %d view(s), %d materialized view(s), "
            "%d enum(s), %d composite type(s), %d relationship(s)",
            clean(schema.name),
            len(schema.tables),
            len(schema.views),
            len(schema.materialized_views),
            len(schema.db_enums),
            len(schema.composite_types),
            len(schema.foreign_keys),
        )
        return "".join(parts)

    def render_enum(self, db_enum: DbEnum) -> str:
        lines = [f'\tentity "{db_enum.enum_name}" <<enum>> {{\n']
        lines.extend(f"\t\t{value}\n" for value in db_enum.enum_values)
        lines.append("\t}\n")
        return "".join(lines)

    def render_composite_type(self, composite: DbCompositeType) -> str:
        lines = [f'\tentity "{composite.type_name}" <<composite>> {{\n']
        lines.extend(
            f"\t\t{field.field_name} : {field.field_type}\n" for field in composite.fields
        )
        lines.append("\t}\n")
        return "".join(lines)

    def _render_columns_entity(
        self, owner: View | MaterializedView, stereotype: str
    ) -> str:
        lines = [f'\tentity "{owner.name}" <<{stereotype}>> {{\n']
        lines.extend(
            f"\t\t{self.entity_formatter(owner, column)}\n" for column in owner.columns
        )
        lines.append("\t}\n")
        return "".join(lines)

    def render_view(self, view: View) -> str:
        return self._render_columns_entity(view, "view")

    def render_materialized_view(self, view: MaterializedView) -> str:
        return self._render_columns_entity(view, "materialized_view")

    def render_table(self, table: Table) -> str:
        if table.is_partitioned:
            lines = [f'\tentity "{table.name}" <<partitioned: {table.partition_key}>> {{\n']
        else:
            lines = [f'\tentity "{table.name}" {{\n']

        pk_names = table.primary_key_columns
        pk_columns = [c for c in table.columns if c.name in pk_names]
        other_columns = [c for c in table.columns if c.name not in pk_names]

        lines.extend(f"\t\t{self.entity_formatter(table, c)}\n" for c in pk_columns)
        if pk_columns and other_columns:
            lines.append("\t\t--\n")
        lines.extend(f"\t\t{self.entity_formatter(table, c)}\n" for c in other_columns)
        lines.append("\t}\n")

        if table.is_partitioned and table.partition_names:
            lines.append(f"\t' Partitions: {', '.join(table.partition_names)}\n")
        return "".join(lines)

    def render_relationships(self, schema: Schema) -> str:
        by_target: dict[str, list[ForeignKey]] = {}
        for fk in schema.foreign_keys:
            by_target.setdefault(fk.target_table, []).append(fk)

        lines: list[str] = []
        for target in sorted(by_target):
            for fk in by_target[target]:
                lines.append(self.relationship_formatter(fk, schema.name) + "\n")
            lines.append("\n")
        return "".join(lines)


def render_puml(schemas: Iterable[Schema]) -> str:
    """Render schemas with the default formatter chains."""
    return PumlRenderer().render(schemas)

