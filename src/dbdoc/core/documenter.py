"""Top-level entry point: configuration in, PlantUML text out."""

from __future__ import annotations

import logging

from dbdoc.core.adapters.postgresql import PostgresConnectionProvider
from dbdoc.core.config import DatabaseType, DocumenterConfig
from dbdoc.core.logs import clean
from dbdoc.core.models import Schema
from dbdoc.core.render import render_puml
from dbdoc.core.schemas import SessionFactory, build_schemas

logger = logging.getLogger(__name__)


def session_factory_for(config: DocumenterConfig) -> SessionFactory:
    """Return the session factory for the configured engine."""
    if config.database_type is DatabaseType.POSTGRESQL:
        return PostgresConnectionProvider(config)
    raise ValueError(f"Unsupported database type: {config.database_type}")


def load_schemas(
    config: DocumenterConfig, session_factory: SessionFactory | None = None
) -> list[Schema]:
    factory = session_factory or session_factory_for(config)
    return build_schemas(factory, config.schemas)


def generate_puml(
    config: DocumenterConfig, session_factory: SessionFactory | None = None
) -> str:
    """Build every configured schema and render them as one PlantUML document."""
    logger.info(
        "Generating PlantUML for schemas: %s", ", ".join(clean(s) for s in config.schemas)
    )
    schemas = load_schemas(config, session_factory)
    puml = render_puml(schemas)
    logger.info("Generated PlantUML for %d schema(s)", len(schemas))
    return puml
