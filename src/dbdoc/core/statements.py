"""SQL text for each catalog query, per database engine.

`SqlAgnosticStatements` holds queries that only use ANSI
`information_schema` views and work on any compliant engine. Queries that
need engine catalogs (enums, composite types, materialized views,
partitions) only exist on the engine subclass. Placeholders use the
DB-API `pyformat` style understood by psycopg2.

Every query's result-column shape matches what the row mapper for that
query reads; see `dbdoc.core.mappers`.
"""

from __future__ import annotations

from dbdoc.core.queries import QueryId

TABLE_INFO = """
SELECT
  table_name,
  NULL AS partition_key
FROM information_schema.tables
WHERE table_schema = %s
  AND table_type = 'BASE TABLE'
ORDER BY table_name;
"""

COLUMN_INFO = """
SELECT
  c.column_name,
  c.ordinal_position,
  c.is_nullable,
  c.data_type,
  c.character_maximum_length,
  c.numeric_precision,
  c.numeric_scale,
  c.column_default,
  c.is_generated,
  c.generation_expression,
  CASE WHEN EXISTS (
    SELECT 1
    FROM information_schema.key_column_usage kcu2
    JOIN information_schema.table_constraints tc2
      ON tc2.constraint_name = kcu2.constraint_name
     AND tc2.table_schema = kcu2.table_schema
     AND tc2.constraint_type = 'UNIQUE'
    WHERE kcu2.table_schema = c.table_schema
      AND kcu2.table_name = c.table_name
      AND kcu2.column_name = c.column_name
  ) THEN true ELSE false END AS is_unique,
  NULL AS composite_unique_constraint_name,
  CASE WHEN EXISTS (
    SELECT 1
    FROM information_schema.constraint_column_usage ccu2
    JOIN information_schema.check_constraints cc2
      ON cc2.constraint_name = ccu2.constraint_name
    JOIN information_schema.table_constraints tc2
      ON tc2.constraint_name = cc2.constraint_name
     AND tc2.constraint_type = 'CHECK'
    WHERE ccu2.table_schema = c.table_schema
      AND ccu2.table_name = c.table_name
      AND ccu2.column_name = c.column_name
  ) THEN 'HAS_CHECK' ELSE NULL END AS check_constraint,
  false AS is_auto_increment
FROM information_schema.columns c
WHERE c.table_schema = %s
  AND c.table_name = %s
ORDER BY c.ordinal_position;
"""

PRIMARY_KEY_INFO = """
SELECT
  tc.constraint_name,
  tc.table_name,
  kcu.column_name
FROM information_schema.table_constraints AS tc
JOIN information_schema.key_column_usage AS kcu
  ON tc.constraint_name = kcu.constraint_name
 AND tc.table_schema = kcu.table_schema
WHERE tc.constraint_type = 'PRIMARY KEY'
  AND tc.table_schema = %s
  AND tc.table_name = %s
ORDER BY kcu.ordinal_position;
"""

FOREIGN_KEY_INFO = """
SELECT
  tc.constraint_name,
  kcu.table_schema AS source_schema,
  kcu.table_name AS source_table_name,
  kcu.column_name AS source_column,
  ccu.table_schema AS referenced_schema,
  ccu.table_name AS referenced_table,
  ccu.column_name AS referenced_column,
  rc.delete_rule AS on_delete_type,
  rc.update_rule AS on_update_type
FROM information_schema.table_constraints AS tc
JOIN information_schema.key_column_usage AS kcu
  ON tc.constraint_name = kcu.constraint_name
 AND tc.table_schema = kcu.table_schema
JOIN information_schema.constraint_column_usage AS ccu
  ON tc.constraint_name = ccu.constraint_name
JOIN information_schema.referential_constraints AS rc
  ON tc.constraint_name = rc.constraint_name
 AND tc.table_schema = rc.constraint_schema
WHERE tc.constraint_type = 'FOREIGN KEY'
  AND kcu.table_schema = %s
  AND kcu.table_name = %s;
"""

VIEW_INFO = """
SELECT
  v.table_name
FROM information_schema.views v
WHERE v.table_schema = %s
ORDER BY v.table_name;
"""

COLUMN_UDT_MAPPINGS = """
SELECT
  c.table_name,
  c.column_name,
  c.udt_schema,
  c.udt_name
FROM information_schema.columns c
WHERE c.table_schema = %s
  AND c.data_type = 'USER-DEFINED'
ORDER BY c.table_name, c.ordinal_position;
"""

PG_TABLE_INFO = """
SELECT
  t.table_name,
  CASE WHEN c.relkind = 'p' THEN pg_get_partkeydef(c.oid) ELSE NULL END AS partition_key
FROM information_schema.tables t
JOIN pg_catalog.pg_class c ON c.relname = t.table_name
JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace AND n.nspname = t.table_schema
WHERE t.table_schema = %s
  AND t.table_type = 'BASE TABLE'
  AND c.relispartition = false
ORDER BY c.oid;
"""

PG_COLUMN_INFO = """
SELECT DISTINCT
  c.column_name,
  c.ordinal_position,
  c.is_nullable,
  CASE
    WHEN c.data_type = 'ARRAY' THEN SUBSTRING(c.udt_name FROM 2) || '[]'
    ELSE c.data_type
  END AS data_type,
  c.udt_schema,
  c.character_maximum_length,
  c.numeric_precision,
  c.numeric_scale,
  c.column_default,
  c.is_generated,
  c.generation_expression,
  CASE
    WHEN COUNT(DISTINCT uc.constraint_name) > 0 THEN true
    ELSE false
  END AS is_unique,
  (
    SELECT STRING_AGG(DISTINCT uc2.constraint_name, ',')
    FROM information_schema.table_constraints uc2
    JOIN information_schema.key_column_usage kcu2
      ON uc2.constraint_name = kcu2.constraint_name
     AND uc2.table_schema = kcu2.table_schema
    WHERE uc2.constraint_type = 'UNIQUE'
      AND uc2.table_schema = c.table_schema
      AND uc2.table_name = c.table_name
      AND kcu2.column_name = c.column_name
      AND (
        SELECT COUNT(*)
        FROM information_schema.key_column_usage kcu3
        WHERE kcu3.constraint_name = uc2.constraint_name
          AND kcu3.table_schema = uc2.table_schema
      ) > 1
  ) AS composite_unique_constraint_name,
  STRING_AGG(DISTINCT cc.check_clause, ' AND ') AS check_constraint,
  CASE
    WHEN c.column_default LIKE 'nextval%%' THEN true
    ELSE false
  END AS is_auto_increment
FROM information_schema.columns c
LEFT JOIN information_schema.key_column_usage kcu
  ON c.table_schema = kcu.table_schema
 AND c.table_name = kcu.table_name
 AND c.column_name = kcu.column_name
LEFT JOIN information_schema.table_constraints uc
  ON kcu.constraint_name = uc.constraint_name
 AND kcu.table_schema = uc.table_schema
 AND uc.constraint_type = 'UNIQUE'
LEFT JOIN information_schema.constraint_column_usage ccu
  ON c.table_schema = ccu.table_schema
 AND c.table_name = ccu.table_name
 AND c.column_name = ccu.column_name
LEFT JOIN information_schema.check_constraints cc
  ON ccu.constraint_name = cc.constraint_name
 AND EXISTS (
   SELECT 1 FROM information_schema.table_constraints tc
   WHERE tc.constraint_name = cc.constraint_name
     AND tc.constraint_type = 'CHECK'
 )
WHERE c.table_schema = %s
  AND c.table_name = %s
GROUP BY c.table_schema, c.table_name, c.column_name, c.ordinal_position,
         c.is_nullable, c.data_type,
         c.udt_name, c.udt_schema, c.character_maximum_length,
         c.numeric_precision, c.numeric_scale,
         c.column_default, c.is_generated, c.generation_expression
ORDER BY c.ordinal_position;
"""

PG_ENUM_INFO = """
SELECT DISTINCT
  n.nspname AS udt_schema,
  t.typname AS udt_name
FROM pg_type t
JOIN pg_namespace n ON t.typnamespace = n.oid
WHERE n.nspname = %s
  AND t.typtype = 'e'
ORDER BY t.typname;
"""

PG_ENUM_VALUES = """
SELECT
  e.enumlabel
FROM pg_type t
JOIN pg_enum e ON t.oid = e.enumtypid
JOIN pg_namespace n ON n.oid = t.typnamespace
WHERE n.nspname = %s
  AND t.typname = %s
ORDER BY e.enumsortorder;
"""

PG_COMPOSITE_TYPE_INFO = """
SELECT
  t.typname AS type_name,
  n.nspname AS schema_name,
  a.attname AS attribute_name,
  pg_catalog.format_type(a.atttypid, a.atttypmod) AS attribute_type,
  a.attnum AS attribute_position
FROM pg_type t
JOIN pg_namespace n ON n.oid = t.typnamespace
LEFT JOIN pg_attribute a ON a.attrelid = t.typrelid AND a.attnum > 0 AND NOT a.attisdropped
WHERE n.nspname = %s
  AND t.typtype = 'c'
  AND t.typrelid != 0
  AND NOT EXISTS (
    SELECT 1 FROM pg_class c
    WHERE c.oid = t.typrelid AND c.relkind IN ('r', 'v', 'm', 'p')
  )
ORDER BY t.typname, a.attnum;
"""

PG_MATERIALIZED_VIEW_INFO = """
SELECT
  c.relname AS table_name
FROM pg_catalog.pg_class c
JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
WHERE n.nspname = %s
  AND c.relkind = 'm'
ORDER BY c.relname;
"""

# information_schema.columns omits materialized views, so their columns come
# from pg_attribute with the type names translated to the SQL-standard
# spelling used by information_schema.
PG_MATERIALIZED_VIEW_COLUMN_INFO = """
SELECT
  a.attname AS column_name,
  a.attnum AS ordinal_position,
  CASE WHEN a.attnotnull THEN 'NO' ELSE 'YES' END AS is_nullable,
  CASE
    WHEN t.typcategory = 'A' THEN
      CASE
        WHEN et.typname = 'int2'        THEN 'smallint'
        WHEN et.typname = 'int4'        THEN 'integer'
        WHEN et.typname = 'int8'        THEN 'bigint'
        WHEN et.typname = 'varchar'     THEN 'character varying'
        WHEN et.typname = 'bpchar'      THEN 'character'
        WHEN et.typname = 'bool'        THEN 'boolean'
        WHEN et.typname = 'float4'      THEN 'real'
        WHEN et.typname = 'float8'      THEN 'double precision'
        WHEN et.typname = 'timestamptz' THEN 'timestamp with time zone'
        WHEN et.typname = 'timestamp'   THEN 'timestamp without time zone'
        ELSE et.typname
      END || '[]'
    WHEN t.typtype IN ('e', 'c') THEN 'USER-DEFINED'
    WHEN t.typname = 'int2'        THEN 'smallint'
    WHEN t.typname = 'int4'        THEN 'integer'
    WHEN t.typname = 'int8'        THEN 'bigint'
    WHEN t.typname = 'varchar'     THEN 'character varying'
    WHEN t.typname = 'bpchar'      THEN 'character'
    WHEN t.typname = 'bool'        THEN 'boolean'
    WHEN t.typname = 'float4'      THEN 'real'
    WHEN t.typname = 'float8'      THEN 'double precision'
    WHEN t.typname = 'timestamptz' THEN 'timestamp with time zone'
    WHEN t.typname = 'timestamp'   THEN 'timestamp without time zone'
    ELSE t.typname
  END AS data_type,
  tn.nspname AS udt_schema,
  CASE
    WHEN t.typname IN ('varchar', 'bpchar') AND a.atttypmod > 0
      THEN (a.atttypmod - 4)::integer
    WHEN t.typcategory = 'A'
      AND et.typname IN ('varchar', 'bpchar') AND a.atttypmod > 0
      THEN (a.atttypmod - 4)::integer
    ELSE 0
  END AS character_maximum_length,
  CASE WHEN t.typname = 'numeric' AND a.atttypmod > 0
    THEN (((a.atttypmod - 4) >> 16) & 65535)::integer
    ELSE NULL
  END AS numeric_precision,
  CASE WHEN t.typname = 'numeric' AND a.atttypmod > 0
    THEN ((a.atttypmod - 4) & 65535)::integer
    ELSE NULL
  END AS numeric_scale,
  NULL::text AS column_default,
  'NEVER'::text AS is_generated,
  NULL::text AS generation_expression,
  false AS is_unique,
  NULL::text AS composite_unique_constraint_name,
  NULL::text AS check_constraint,
  false AS is_auto_increment
FROM pg_catalog.pg_attribute a
JOIN pg_catalog.pg_class c ON c.oid = a.attrelid
JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
JOIN pg_catalog.pg_type t ON t.oid = a.atttypid
JOIN pg_catalog.pg_namespace tn ON tn.oid = t.typnamespace
LEFT JOIN pg_catalog.pg_type et ON et.oid = t.typelem
WHERE n.nspname = %s
  AND c.relname = %s
  AND c.relkind = 'm'
  AND a.attnum > 0
  AND NOT a.attisdropped
ORDER BY a.attnum;
"""

PG_COLUMN_UDT_MAPPINGS = """
WITH target AS (SELECT %s::text AS schema_name)
SELECT
  c.table_name,
  c.column_name,
  c.udt_schema,
  c.udt_name
FROM information_schema.columns c, target
WHERE c.table_schema = target.schema_name
  AND c.data_type = 'USER-DEFINED'
UNION ALL
SELECT
  cl.relname AS table_name,
  a.attname AS column_name,
  tn.nspname AS udt_schema,
  t.typname AS udt_name
FROM pg_catalog.pg_attribute a
JOIN pg_catalog.pg_class cl ON cl.oid = a.attrelid
JOIN pg_catalog.pg_namespace n ON n.oid = cl.relnamespace
JOIN pg_catalog.pg_type t ON t.oid = a.atttypid
JOIN pg_catalog.pg_namespace tn ON tn.oid = t.typnamespace
JOIN target ON n.nspname = target.schema_name
WHERE cl.relkind = 'm'
  AND a.attnum > 0
  AND NOT a.attisdropped
  AND t.typtype IN ('e', 'c')
ORDER BY 1, 2;
"""

PG_PARTITION_CHILDREN = """
SELECT
  p.relname AS table_name,
  c.relname AS partition_name
FROM pg_class p
JOIN pg_namespace n ON n.oid = p.relnamespace
JOIN pg_inherits i ON i.inhparent = p.oid
JOIN pg_class c ON c.oid = i.inhrelid
WHERE n.nspname = %s
  AND p.relkind = 'p'
ORDER BY p.relname, c.relname;
"""


class SqlAgnosticStatements:
    """Queries portable across engines that implement `information_schema`."""

    _STATEMENTS: dict[QueryId, str] = {
        QueryId.TABLE_INFO: TABLE_INFO,
        QueryId.COLUMN_INFO: COLUMN_INFO,
        QueryId.PRIMARY_KEY_INFO: PRIMARY_KEY_INFO,
        QueryId.FOREIGN_KEY_INFO: FOREIGN_KEY_INFO,
        QueryId.VIEW_INFO: VIEW_INFO,
        QueryId.COLUMN_UDT_MAPPINGS: COLUMN_UDT_MAPPINGS,
    }

    def supports(self, query_id: QueryId) -> bool:
        """Return True if this engine has SQL for the query."""
        return query_id in self._STATEMENTS

    def sql(self, query_id: QueryId) -> str:
        """Return the SQL text for a query identity."""
        try:
            return self._STATEMENTS[query_id]
        except KeyError as exc:
            raise NotImplementedError(
                f"{type(self).__name__} has no statement for {query_id.value}"
            ) from exc


class PostgresqlStatements(SqlAgnosticStatements):
    """PostgreSQL catalog queries (`pg_catalog` plus `information_schema`)."""

    _STATEMENTS: dict[QueryId, str] = {
        **SqlAgnosticStatements._STATEMENTS,
        QueryId.TABLE_INFO: PG_TABLE_INFO,
        QueryId.COLUMN_INFO: PG_COLUMN_INFO,
        QueryId.ENUM_INFO: PG_ENUM_INFO,
        QueryId.ENUM_VALUES: PG_ENUM_VALUES,
        QueryId.COMPOSITE_TYPE_INFO: PG_COMPOSITE_TYPE_INFO,
        QueryId.MATERIALIZED_VIEW_INFO: PG_MATERIALIZED_VIEW_INFO,
        QueryId.MATERIALIZED_VIEW_COLUMN_INFO: PG_MATERIALIZED_VIEW_COLUMN_INFO,
        QueryId.PARTITION_CHILDREN: PG_PARTITION_CHILDREN,
        QueryId.COLUMN_UDT_MAPPINGS: PG_COLUMN_UDT_MAPPINGS,
    }
