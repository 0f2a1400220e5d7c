"""Base introspector interface."""

import fnmatch
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from fraiseql_introspect.exceptions import TableNotFoundError
from fraiseql_introspect.models import Column, ForeignKey, PrimaryKey, Table
from fraiseql_introspect.type_mapping import TypeMap

logger = logging.getLogger(__name__)

# Bookkeeping tables written by common migration tools
DEFAULT_EXCLUDE_TABLES: tuple[str, ...] = (
    "gorp_migrations",
    "schema_migrations",
    "alembic_version",
    "flyway_schema_history",
    "goose_db_version",
    "django_migrations",
    "__diesel_schema_migrations",
    "knex_migrations*",
)


def is_excluded(table_name: str, patterns: Iterable[str]) -> bool:
    """Check table name against glob-style exclusion patterns."""
    return any(fnmatch.fnmatchcase(table_name, pattern) for pattern in patterns)


class BaseIntrospector(ABC):
    """
    Base class for engine-specific schema introspectors.

    Subclasses implement the catalog readers; table assembly and name
    filtering are shared. The connection is injected and never opened,
    closed or cached here.

    Example:
        >>> introspector = PostgresIntrospector(conn, schema="public")
        >>> tables = introspector.get_tables()
        >>> users = introspector.get_tables("users")[0]
    """

    dialect: str = ""
    type_map: TypeMap

    def __init__(
        self,
        conn,
        schema: str,
        exclude_tables: Iterable[str] | None = None,
        include_views: bool = False,
    ):
        """
        Initialize introspector.

        Args:
            conn: Open database connection
            schema: Schema to introspect
            exclude_tables: Glob patterns skipped when listing all tables
                (defaults to DEFAULT_EXCLUDE_TABLES)
            include_views: Also list views when no table names are given
        """
        self.conn = conn
        self.schema = schema
        self.exclude_tables = list(
            DEFAULT_EXCLUDE_TABLES if exclude_tables is None else exclude_tables
        )
        self.include_views = include_views

    @abstractmethod
    def list_table_names(self) -> list[str]:
        """List every table name in the schema, unfiltered, in catalog order."""
        pass

    @abstractmethod
    def table_exists(self, table_name: str) -> bool:
        """Check whether a table exists in the schema."""
        pass

    @abstractmethod
    def get_columns(self, table_name: str) -> list[Column]:
        """Get translated columns for a table in declaration order."""
        pass

    @abstractmethod
    def get_primary_key(self, table_name: str) -> PrimaryKey | None:
        """Get the primary key for a table, or None if it has none."""
        pass

    @abstractmethod
    def get_foreign_keys(self, table_name: str) -> list[ForeignKey]:
        """Get all foreign keys declared on a table."""
        pass

    def get_table_names(self) -> list[str]:
        """Get all table names in schema minus excluded bookkeeping tables."""
        names = []
        for name in self.list_table_names():
            if is_excluded(name, self.exclude_tables):
                logger.debug(f"Skipping excluded table '{name}'")
                continue
            names.append(name)
        return names

    def get_table(self, table_name: str) -> Table:
        """
        Get complete table information.

        Raises:
            TableNotFoundError: If table doesn't exist in schema
        """
        if not self.table_exists(table_name):
            raise TableNotFoundError(table_name, self.schema)

        columns = self.get_columns(table_name)
        primary_key = self.get_primary_key(table_name)
        foreign_keys = self.get_foreign_keys(table_name)

        return Table(
            name=table_name,
            columns=columns,
            primary_key=primary_key,
            foreign_keys=foreign_keys,
        )

    def get_tables(self, *names: str) -> list[Table]:
        """
        Get table metadata for the given tables, or all tables if none given.

        Args:
            *names: Table names; order is preserved in the result

        Returns:
            One Table per name, in request order

        Raises:
            FraiseQLIntrospectError: First failure encountered (no partial result)
        """
        table_names = list(names) if names else self.get_table_names()

        tables = [self.get_table(name) for name in table_names]

        logger.info(f"Introspected {len(tables)} tables from schema '{self.schema}'")
        return tables
