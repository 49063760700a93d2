"""Commands that read the catalog and document it."""

from __future__ import annotations

from pathlib import Path

import typer

from dbdoc.cli.common.context import DocAppContext, build_doc_context
from dbdoc.cli.common.exits import EXIT_CONFIG, EXIT_DATABASE, EXIT_OUTPUT, exit_from_exc
from dbdoc.cli.common.logs import configure_logging
from dbdoc.cli.common.options import (
    ConnectTimeoutOpt,
    DatabaseOpt,
    HostOpt,
    OutputOpt,
    PasswordOpt,
    PortOpt,
    SchemasOpt,
    SslOpt,
    UsernameOpt,
    VerboseOpt,
)
from dbdoc.cli.common.output import out
from dbdoc.core.documenter import load_schemas
from dbdoc.core.models import Schema
from dbdoc.core.render import render_puml
from dbdoc.core.rows import CatalogAccessError
from dbdoc.core.schemas import SchemaBuildError
from dbdoc.core.validation import ValidationError


def _load_or_exit(appctx: DocAppContext) -> list[Schema]:
    """Build the configured schemas, mapping failures to exit codes."""
    try:
        with out.status(f"Reading catalog of {appctx.config.database}..."):
            return load_schemas(appctx.config, appctx.session_factory)
    except SchemaBuildError as exc:
        cause = exc.__cause__
        if isinstance(cause, ValidationError):
            code = EXIT_CONFIG
            reason = f"invalid catalog data ({cause})"
        else:
            code = EXIT_DATABASE if isinstance(cause, CatalogAccessError) else EXIT_OUTPUT
            reason = str(cause) if cause else "unknown error"
        exit_from_exc(exc, message=f"{exc}: {reason}", code=code)


def generate(
    host: str = HostOpt,
    port: int = PortOpt,
    database: str = DatabaseOpt,
    username: str = UsernameOpt,
    password: str = PasswordOpt,
    schemas: str = SchemasOpt,
    ssl: bool = SslOpt,
    connect_timeout: int = ConnectTimeoutOpt,
    output: Path | None = OutputOpt,
    verbose: bool = VerboseOpt,
):
    """Generate a PlantUML entity-relationship diagram."""
    configure_logging(verbose)
    appctx = build_doc_context(
        host=host,
        port=port,
        database=database,
        username=username,
        password=password,
        schemas=schemas,
        use_ssl=ssl,
        connect_timeout=connect_timeout,
    )

    built = _load_or_exit(appctx)
    try:
        puml = render_puml(built)
    except Exception as exc:
        exit_from_exc(exc, message=f"Rendering failed: {exc}", code=EXIT_OUTPUT)

    if output is None:
        typer.echo(puml, nl=False)
        return

    try:
        output.write_text(puml, encoding="utf-8")
    except OSError as exc:
        exit_from_exc(exc, message=f"Cannot write {output}: {exc}", code=EXIT_OUTPUT)
    out.success(f"Wrote {len(built)} schema(s) to {output}")


def inspect(
    host: str = HostOpt,
    port: int = PortOpt,
    database: str = DatabaseOpt,
    username: str = UsernameOpt,
    password: str = PasswordOpt,
    schemas: str = SchemasOpt,
    ssl: bool = SslOpt,
    connect_timeout: int = ConnectTimeoutOpt,
    verbose: bool = VerboseOpt,
):
    """Summarize what would be documented, per schema."""
    configure_logging(verbose)
    appctx = build_doc_context(
        host=host,
        port=port,
        database=database,
        username=username,
        password=password,
        schemas=schemas,
        use_ssl=ssl,
        connect_timeout=connect_timeout,
    )

    built = _load_or_exit(appctx)

    out.header("Catalog summary")
    out.kv({"Database": appctx.config.database, "Host": appctx.config.host})
    out.schemas_table(built)
    for schema in built:
        if schema.tables:
            out.tables_table(schema)
