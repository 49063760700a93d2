"""Application context management for the CLI."""

from dataclasses import dataclass

from dbdoc.cli.common.exits import EXIT_CONFIG, die
from dbdoc.core.config import DocumenterConfig, parse_schema_list
from dbdoc.core.documenter import session_factory_for
from dbdoc.core.schemas import SessionFactory
from dbdoc.core.validation import ValidationError


@dataclass
class DocAppContext:
    """Application context holding the run configuration and its session factory."""

    config: DocumenterConfig
    session_factory: SessionFactory


def build_doc_context(
    *,
    host: str,
    port: int,
    database: str,
    username: str,
    password: str,
    schemas: str,
    use_ssl: bool,
    connect_timeout: int,
) -> DocAppContext:
    """Validate CLI input into a DocAppContext, exiting with code 1 when it is invalid."""
    try:
        config = DocumenterConfig(
            schemas=tuple(parse_schema_list(schemas)),
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            use_ssl=use_ssl,
            connect_timeout=connect_timeout,
        )
        factory = session_factory_for(config)
    except (ValidationError, ValueError) as exc:
        die(f"Invalid configuration: {exc}", code=EXIT_CONFIG)
    return DocAppContext(config=config, session_factory=factory)
