"""Run configuration for the documenter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from dbdoc.core.validation import (
    ValidationError,
    contains_at_least_one_item,
    is_not_blank,
    is_not_none,
    is_positive,
)

DEFAULT_PORT = 5432
DEFAULT_CONNECT_TIMEOUT = 10


class DatabaseType(str, Enum):
    """Supported database engines."""

    POSTGRESQL = "postgresql"


def parse_schema_list(value: str) -> list[str]:
    """Split a comma separated schema list, dropping blanks (`core, sales` -> [core, sales])."""
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class DocumenterConfig:
    """
    Connection settings and the schemas to document.

    Attributes:
        schemas: Schema names in output order; at least one.
        host: Database host.
        database: Database name.
        username: Login role.
        password: Login password.
        port: Database port.
        use_ssl: Require SSL when True, disable it when False.
        database_type: Engine to document.
        connect_timeout: Connection timeout in seconds.
    """

    schemas: tuple[str, ...]
    host: str
    database: str
    username: str
    password: str = field(repr=False)
    port: int = DEFAULT_PORT
    use_ssl: bool = True
    database_type: DatabaseType = DatabaseType.POSTGRESQL
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT

    def __post_init__(self) -> None:
        contains_at_least_one_item(self.schemas, "schemas")
        object.__setattr__(self, "schemas", tuple(self.schemas))
        for schema in self.schemas:
            is_not_blank(schema, "schemas")
        if len(set(self.schemas)) != len(self.schemas):
            raise ValidationError("schemas must not contain duplicates")
        is_not_blank(self.host, "host")
        is_not_blank(self.database, "database")
        is_not_blank(self.username, "username")
        is_not_blank(self.password, "password")
        is_not_none(self.database_type, "database_type")
        is_positive(self.port, "port")
        if self.port > 65535:
            raise ValidationError("port must be between 1 and 65535")
        is_positive(self.connect_timeout, "connect_timeout")
