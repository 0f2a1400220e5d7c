"""PostgreSQL schema introspection over information_schema and pg_catalog."""

import logging
from collections.abc import Callable, Iterable
from typing import Any

import psycopg
from psycopg import Connection

from fraiseql_introspect.exceptions import (
    IntrospectionConnectionError,
    QueryError,
    ScanError,
    SchemaNotFoundError,
)
from fraiseql_introspect.introspection.base import BaseIntrospector
from fraiseql_introspect.models import Column, ForeignKey, PrimaryKey
from fraiseql_introspect.type_mapping import POSTGRES_TYPE_MAP

logger = logging.getLogger(__name__)

SCHEMA_EXISTS_QUERY = """
    SELECT EXISTS(SELECT 1 FROM information_schema.schemata WHERE schema_name = %s)
"""

TABLE_NAMES_QUERY = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = %s
      AND table_type = ANY(%s)
    ORDER BY table_name
"""

TABLE_EXISTS_QUERY = """
    SELECT EXISTS(
        SELECT 1 FROM information_schema.tables
        WHERE table_schema = %s AND table_name = %s
    )
"""

COLUMNS_QUERY = """
    SELECT
        c.column_name,
        c.data_type,
        c.is_nullable,
        CASE WHEN pk.column_name IS NOT NULL THEN true ELSE false END AS is_pk
    FROM information_schema.columns c
    LEFT JOIN (
        SELECT kcu.column_name
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage kcu
          ON tc.constraint_name = kcu.constraint_name
          AND tc.table_schema = kcu.table_schema
          AND tc.table_name = kcu.table_name
        WHERE tc.constraint_type = 'PRIMARY KEY'
          AND tc.table_schema = %s
          AND tc.table_name = %s
    ) pk ON c.column_name = pk.column_name
    WHERE c.table_schema = %s
      AND c.table_name = %s
    ORDER BY c.ordinal_position
"""

PRIMARY_KEY_NAME_QUERY = """
    SELECT constraint_name
    FROM information_schema.table_constraints
    WHERE constraint_type = 'PRIMARY KEY'
      AND table_schema = %s
      AND table_name = %s
"""

PRIMARY_KEY_COLUMNS_QUERY = """
    SELECT column_name
    FROM information_schema.key_column_usage
    WHERE constraint_schema = %s
      AND constraint_name = %s
      AND table_name = %s
    ORDER BY ordinal_position
"""

# Constraint names are unique per table only, so keys are read from pg_constraint
# scoped to the owning table. conkey/confkey pair up by position.
FOREIGN_KEYS_QUERY = """
    SELECT
        con.conname AS constraint_name,
        att.attname AS column_name,
        ref_cls.relname AS foreign_table_name,
        ref_att.attname AS foreign_column_name
    FROM pg_catalog.pg_constraint AS con
    JOIN pg_catalog.pg_class AS cls
      ON cls.oid = con.conrelid
    JOIN pg_catalog.pg_namespace AS nsp
      ON nsp.oid = cls.relnamespace
    JOIN pg_catalog.pg_class AS ref_cls
      ON ref_cls.oid = con.confrelid
    CROSS JOIN LATERAL unnest(con.conkey, con.confkey)
      WITH ORDINALITY AS fk_cols(attnum, ref_attnum, position)
    JOIN pg_catalog.pg_attribute AS att
      ON att.attrelid = con.conrelid
      AND att.attnum = fk_cols.attnum
    JOIN pg_catalog.pg_attribute AS ref_att
      ON ref_att.attrelid = con.confrelid
      AND ref_att.attnum = fk_cols.ref_attnum
    WHERE con.contype = 'f'
      AND nsp.nspname = %s
      AND cls.relname = %s
    ORDER BY con.conname, fk_cols.position
"""


def _text(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected text for {field}, got {type(value).__name__}")
    return value


def _flag(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if value in ("YES", "NO"):
        return value == "YES"
    raise ValueError(f"expected boolean or YES/NO for {field}, got {value!r}")


class PostgresIntrospector(BaseIntrospector):
    """Introspect a PostgreSQL schema through information_schema."""

    dialect = "postgresql"
    type_map = POSTGRES_TYPE_MAP

    def __init__(
        self,
        conn: Connection,
        schema: str = "public",
        exclude_tables: Iterable[str] | None = None,
        include_views: bool = False,
    ):
        """
        Initialize PostgreSQL introspector.

        Args:
            conn: Open psycopg connection (owned by the caller)
            schema: Schema name
            exclude_tables: Glob patterns skipped when listing all tables
            include_views: Also list views when no table names are given

        Raises:
            IntrospectionConnectionError: If the connection is closed
            SchemaNotFoundError: If schema doesn't exist
        """
        super().__init__(conn, schema, exclude_tables, include_views)

        # Validate schema exists
        self._validate_schema()

    def _validate_schema(self) -> None:
        """Validate that schema exists in database."""
        rows = self._fetch(SCHEMA_EXISTS_QUERY, (self.schema,), stage="schema")
        if not self._scan(rows, lambda row: _flag(row[0], "exists"), "schema")[0]:
            raise SchemaNotFoundError(self.schema)

    def _check_connection(self) -> None:
        if self.conn.closed:
            raise IntrospectionConnectionError("connection is closed")

    def _fetch(
        self, query: str, params: tuple, stage: str, table: str | None = None
    ) -> list[tuple]:
        """Run one catalog query and return all rows."""
        self._check_connection()
        logger.debug(f"Reading {stage} for {table or self.schema!r}")

        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall()
        except psycopg.Error as e:
            if isinstance(e, psycopg.InterfaceError) or self.conn.closed or self.conn.broken:
                raise IntrospectionConnectionError(str(e)) from e
            raise QueryError(table, stage, str(e)) from e

    def _scan(
        self,
        rows: list[tuple],
        decode: Callable[[tuple], Any],
        stage: str,
        table: str | None = None,
    ) -> list[Any]:
        """Decode catalog rows, reporting malformed rows as ScanError."""
        try:
            return [decode(row) for row in rows]
        except (IndexError, TypeError, ValueError) as e:
            raise ScanError(table, stage, str(e)) from e

    def list_table_names(self) -> list[str]:
        table_types = ["BASE TABLE", "VIEW"] if self.include_views else ["BASE TABLE"]
        rows = self._fetch(TABLE_NAMES_QUERY, (self.schema, table_types), "table_names")
        return self._scan(rows, lambda row: _text(row[0], "table_name"), "table_names")

    def table_exists(self, table_name: str) -> bool:
        rows = self._fetch(
            TABLE_EXISTS_QUERY, (self.schema, table_name), "table_exists", table_name
        )
        if not rows:
            return False
        return self._scan(rows, lambda row: _flag(row[0], "exists"), "table_exists", table_name)[0]

    def get_columns(self, table_name: str) -> list[Column]:
        """Get all columns for a table (single query, PK flag included)."""
        rows = self._fetch(
            COLUMNS_QUERY,
            (self.schema, table_name, self.schema, table_name),
            "columns",
            table_name,
        )

        def decode(row: tuple) -> Column:
            name, data_type, is_nullable, is_pk = row
            native_type = _text(data_type, "data_type")
            nullable = _flag(is_nullable, "is_nullable")
            return Column(
                name=_text(name, "column_name"),
                type=self.type_map.translate(native_type, nullable),
                is_nullable=nullable,
                is_primary_key=_flag(is_pk, "is_pk"),
                native_type=native_type,
            )

        return self._scan(rows, decode, "columns", table_name)

    def get_primary_key(self, table_name: str) -> PrimaryKey | None:
        """
        Get the primary key constraint and its columns in key order.

        Returns:
            PrimaryKey, or None if the table has no primary key
        """
        rows = self._fetch(
            PRIMARY_KEY_NAME_QUERY, (self.schema, table_name), "primary_key", table_name
        )
        if not rows:
            logger.debug(f"Table '{table_name}' has no primary key")
            return None

        name = self._scan(
            rows[:1], lambda row: _text(row[0], "constraint_name"), "primary_key", table_name
        )[0]

        rows = self._fetch(
            PRIMARY_KEY_COLUMNS_QUERY,
            (self.schema, name, table_name),
            "primary_key",
            table_name,
        )
        columns = self._scan(
            rows, lambda row: _text(row[0], "column_name"), "primary_key", table_name
        )
        if not columns:
            raise ScanError(table_name, "primary_key", f"constraint '{name}' has no columns")

        return PrimaryKey(name=name, columns=columns)

    def get_foreign_keys(self, table_name: str) -> list[ForeignKey]:
        """Get all foreign keys for a table."""
        rows = self._fetch(
            FOREIGN_KEYS_QUERY, (self.schema, table_name), "foreign_keys", table_name
        )

        def decode(row: tuple) -> ForeignKey:
            name, column, foreign_table, foreign_column = row
            return ForeignKey(
                name=_text(name, "constraint_name"),
                column=_text(column, "column_name"),
                foreign_table=_text(foreign_table, "foreign_table_name"),
                foreign_column=_text(foreign_column, "foreign_column_name"),
            )

        return self._scan(rows, decode, "foreign_keys", table_name)
