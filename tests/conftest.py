"""Pytest configuration and shared fixtures."""

import os
from dataclasses import dataclass, field

import psycopg
import pytest
from psycopg import Connection

from fraiseql_introspect.introspection import postgres

TEST_DATABASE_URL = os.environ.get(
    "FRAISEQL_INTROSPECT_TEST_URL", "postgresql://localhost/fraiseql_test"
)


@dataclass
class FakeTable:
    """Catalog entry for one table in the fake catalog."""

    columns: list[tuple[str, str, bool]]
    primary_key: tuple[str, list[str]] | None = None
    foreign_keys: list[tuple[str, str, str, str]] = field(default_factory=list)
    table_type: str = "BASE TABLE"


class FakeCursor:
    def __init__(self, catalog: "FakeCatalog"):
        self.catalog = catalog
        self._rows: list[tuple] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, query: str, params: tuple = ()) -> None:
        self.catalog.executed.append((query, params))
        if query in self.catalog.failures:
            raise self.catalog.failures[query]
        self._rows = self.catalog.answer(query, params)

    def fetchall(self) -> list[tuple]:
        return list(self._rows)


class FakeCatalog:
    """
    In-memory stand-in for a psycopg connection.

    Answers the PostgresIntrospector catalog queries from declared tables,
    in the same row shapes information_schema returns.
    """

    def __init__(self, schemas: tuple[str, ...] = ("public",)):
        self.schemas = set(schemas)
        self.tables: dict[str, FakeTable] = {}
        self.failures: dict[str, Exception] = {}
        self.overrides: dict[str, list[tuple]] = {}
        self.executed: list[tuple[str, tuple]] = []
        self.closed = False
        self.broken = False

    def add_table(self, name: str, columns, primary_key=None, foreign_keys=None, table_type="BASE TABLE"):
        self.tables[name] = FakeTable(
            columns=list(columns),
            primary_key=primary_key,
            foreign_keys=list(foreign_keys or []),
            table_type=table_type,
        )
        return self

    def fail(self, query: str, error: Exception) -> None:
        self.failures[query] = error

    def override(self, query: str, rows: list[tuple]) -> None:
        self.overrides[query] = rows

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def queries(self) -> list[str]:
        return [query for query, _ in self.executed]

    def answer(self, query: str, params: tuple) -> list[tuple]:
        if query in self.overrides:
            return self.overrides[query]

        if query == postgres.SCHEMA_EXISTS_QUERY:
            return [(params[0] in self.schemas,)]

        if query == postgres.TABLE_NAMES_QUERY:
            _, table_types = params
            return [
                (name,)
                for name in sorted(self.tables)
                if self.tables[name].table_type in table_types
            ]

        if query == postgres.TABLE_EXISTS_QUERY:
            return [(params[1] in self.tables,)]

        if query == postgres.COLUMNS_QUERY:
            table = self.tables.get(params[1])
            if table is None:
                return []
            pk_cols = table.primary_key[1] if table.primary_key else []
            return [
                (name, data_type, "YES" if nullable else "NO", name in pk_cols)
                for name, data_type, nullable in table.columns
            ]

        if query == postgres.PRIMARY_KEY_NAME_QUERY:
            table = self.tables.get(params[1])
            if table is None or table.primary_key is None:
                return []
            return [(table.primary_key[0],)]

        if query == postgres.PRIMARY_KEY_COLUMNS_QUERY:
            _, constraint_name, table_name = params
            table = self.tables[table_name]
            if table.primary_key is None or table.primary_key[0] != constraint_name:
                return []
            return [(col,) for col in table.primary_key[1]]

        if query == postgres.FOREIGN_KEYS_QUERY:
            table = self.tables.get(params[1])
            if table is None:
                return []
            # Stable sort keeps column order within each constraint
            return sorted(table.foreign_keys, key=lambda fk: fk[0])

        raise AssertionError(f"Unexpected query: {query}")


@pytest.fixture
def catalog() -> FakeCatalog:
    """Empty fake catalog with a public schema."""
    return FakeCatalog()


@pytest.fixture
def shop_catalog(catalog: FakeCatalog) -> FakeCatalog:
    """Fake catalog with users/orders tables and a migration table."""
    catalog.add_table(
        "users",
        columns=[
            ("id", "bigint", False),
            ("email", "character varying", False),
            ("bio", "text", True),
        ],
        primary_key=("users_pkey", ["id"]),
    )
    catalog.add_table(
        "orders",
        columns=[
            ("id", "bigint", False),
            ("user_id", "bigint", False),
            ("total", "numeric", True),
            ("placed_at", "timestamp with time zone", False),
        ],
        primary_key=("orders_pkey", ["id"]),
        foreign_keys=[("orders_user_id_fkey", "user_id", "users", "id")],
    )
    catalog.add_table(
        "gorp_migrations",
        columns=[("id", "text", False), ("applied_at", "timestamp with time zone", True)],
        primary_key=("gorp_migrations_pkey", ["id"]),
    )
    return catalog


@pytest.fixture
def db_conn() -> Connection:
    """
    Provide a live test database connection.

    Skips when FRAISEQL_INTROSPECT_TEST_URL (or the local default) is unreachable.
    """
    try:
        conn = psycopg.connect(TEST_DATABASE_URL, autocommit=False)
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    yield conn

    # Rollback any changes
    conn.rollback()
    conn.close()


@pytest.fixture
def test_schema(db_conn: Connection) -> str:
    """
    Create a test schema with sample tables.

    Returns the schema name.
    """
    schema_name = "test_introspect"

    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        cur.execute(f"CREATE SCHEMA {schema_name}")

        cur.execute(f"""
            CREATE TABLE {schema_name}.users (
                id BIGINT PRIMARY KEY,
                email VARCHAR NOT NULL,
                bio TEXT
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.orders (
                id BIGSERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL REFERENCES {schema_name}.users(id),
                total NUMERIC(10, 2),
                placed_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        # Composite key declared in non-alphabetical order
        cur.execute(f"""
            CREATE TABLE {schema_name}.order_lines (
                order_id BIGINT NOT NULL,
                line_no INTEGER NOT NULL,
                sku TEXT NOT NULL,
                PRIMARY KEY (order_id, line_no)
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.shipments (
                id BIGSERIAL PRIMARY KEY,
                order_id BIGINT NOT NULL,
                line_no INTEGER NOT NULL,
                CONSTRAINT shipments_line_fkey FOREIGN KEY (order_id, line_no)
                    REFERENCES {schema_name}.order_lines(order_id, line_no)
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.categories (
                id INTEGER PRIMARY KEY,
                parent_id INTEGER REFERENCES {schema_name}.categories(id),
                name TEXT NOT NULL
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.audit_log (
                payload JSONB,
                logged_at TIMESTAMP
            )
        """)

        # Two tables reusing one hand-written constraint name
        cur.execute(f"""
            CREATE TABLE {schema_name}.products (
                id BIGINT PRIMARY KEY,
                title TEXT NOT NULL
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.wishlists (
                id BIGINT PRIMARY KEY,
                ref_id BIGINT NOT NULL,
                CONSTRAINT fk_ref FOREIGN KEY (ref_id) REFERENCES {schema_name}.users(id)
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.reviews (
                id BIGINT PRIMARY KEY,
                ref_id BIGINT NOT NULL,
                CONSTRAINT fk_ref FOREIGN KEY (ref_id) REFERENCES {schema_name}.products(id)
            )
        """)

        cur.execute(f"""
            CREATE TABLE {schema_name}.gorp_migrations (
                id TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ
            )
        """)

        cur.execute(f"CREATE VIEW {schema_name}.user_emails AS SELECT id, email FROM {schema_name}.users")

        db_conn.commit()

    yield schema_name

    # Cleanup
    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        db_conn.commit()
