"""Common CLI options for the CLI."""

import typer

from dbdoc.core.config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_PORT

HostOpt = typer.Option(
    ...,
    "--host",
    "-H",
    envvar="DBDOC_HOST",
    help="Database host",
)

PortOpt = typer.Option(
    DEFAULT_PORT,
    "--port",
    "-P",
    envvar="DBDOC_PORT",
    help="Database port",
)

DatabaseOpt = typer.Option(
    ...,
    "--database",
    "-d",
    envvar="DBDOC_DATABASE",
    help="Database name",
)

UsernameOpt = typer.Option(
    ...,
    "--username",
    "-u",
    envvar="DBDOC_USERNAME",
    help="Database user",
)

PasswordOpt = typer.Option(
    ...,
    "--password",
    envvar="DBDOC_PASSWORD",
    prompt=True,
    hide_input=True,
    help="Database password (prompted when omitted)",
)

SchemasOpt = typer.Option(
    ...,
    "--schemas",
    "-s",
    envvar="DBDOC_SCHEMAS",
    help="Comma separated schema names, in output order",
)

SslOpt = typer.Option(
    True,
    "--ssl/--no-ssl",
    help="Require SSL for the database connection",
)

ConnectTimeoutOpt = typer.Option(
    DEFAULT_CONNECT_TIMEOUT,
    "--connect-timeout",
    help="Connection timeout in seconds",
)

OutputOpt = typer.Option(
    None,
    "--output",
    "-o",
    help="Write the diagram to this file instead of stdout",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log progress at INFO level",
)
