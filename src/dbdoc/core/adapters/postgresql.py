from __future__ import annotations

import logging
from typing import Any, Callable

import psycopg2
from psycopg2.extras import RealDictCursor

from dbdoc.core.config import DocumenterConfig
from dbdoc.core.logs import clean
from dbdoc.core.queries import QueryId
from dbdoc.core.rows import CatalogAccessError, Row, rows
from dbdoc.core.statements import PostgresqlStatements, SqlAgnosticStatements

logger = logging.getLogger(__name__)

Connect = Callable[..., Any]


class PostgresSession:
    """
    One read-only psycopg2 connection, used as a QueryExecutor.

    The connection is opened on `__enter__` and closed on `__exit__`, also
    when the body raised. Driver errors surface as CatalogAccessError.
    """

    def __init__(
        self,
        config: DocumenterConfig,
        *,
        statements: SqlAgnosticStatements | None = None,
        connect: Connect = psycopg2.connect,
    ) -> None:
        self.config = config
        self.statements = statements or PostgresqlStatements()
        self._connect = connect
        self._conn = None

    def __enter__(self) -> PostgresSession:
        cfg = self.config
        try:
            self._conn = self._connect(
                host=cfg.host,
                port=cfg.port,
                dbname=cfg.database,
                user=cfg.username,
                password=cfg.password,
                sslmode="require" if cfg.use_ssl else "disable",
                connect_timeout=cfg.connect_timeout,
            )
            self._conn.set_session(readonly=True, autocommit=True)
        except psycopg2.Error as exc:
            self.close()
            raise CatalogAccessError(
                f"Could not connect to {cfg.host}:{cfg.port}/{cfg.database}: {exc}"
            ) from exc
        logger.debug("Connected to %s:%s/%s", clean(cfg.host), cfg.port, clean(cfg.database))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        finally:
            self._conn = None

    def execute(self, query_id: QueryId, *params: str) -> list[Row]:
        if self._conn is None:
            raise CatalogAccessError("Session is not open")
        sql = self.statements.sql(query_id)
        try:
            with self._conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, params)
                records = cur.fetchall()
        except psycopg2.Error as exc:
            raise CatalogAccessError(f"Query {query_id.value} failed: {exc}") from exc
        return list(rows(records))


class PostgresConnectionProvider:
    """Session factory for PostgreSQL: each call returns a new, unopened session."""

    def __init__(self, config: DocumenterConfig, *, connect: Connect = psycopg2.connect) -> None:
        self.config = config
        self._connect = connect

    def __call__(self) -> PostgresSession:
        return PostgresSession(self.config, connect=self._connect)
