"""Custom exceptions with helpful error messages."""


class FraiseQLIntrospectError(Exception):
    """Base exception for fraiseql-introspect errors."""

    pass


class IntrospectionConnectionError(FraiseQLIntrospectError):
    """Connection handle cannot be used for catalog queries."""

    def __init__(self, detail: str):
        super().__init__(
            f"Database connection is not usable: {detail}\n\n"
            f"Suggestions:\n"
            f"1. Open the connection before creating the introspector\n"
            f"2. Check that the server is reachable and the session is not closed\n"
            f"3. Check database connection settings"
        )


class CatalogError(FraiseQLIntrospectError):
    """Catalog lookup failed for a table at a given stage."""

    def __init__(self, message: str, table: str | None, stage: str):
        self.table = table
        self.stage = stage
        super().__init__(message)


class QueryError(CatalogError):
    """Catalog query failed to execute."""

    def __init__(self, table: str | None, stage: str, detail: str):
        target = f"table '{table}'" if table else "schema"
        super().__init__(
            f"Catalog query failed while reading {stage} for {target}: {detail}\n\n"
            f"Suggestions:\n"
            f"1. Check that the role can read information_schema\n"
            f"2. Check the server log for the failing statement",
            table,
            stage,
        )


class ScanError(CatalogError):
    """Catalog row could not be decoded into the expected shape."""

    def __init__(self, table: str | None, stage: str, detail: str):
        target = f"table '{table}'" if table else "schema"
        super().__init__(
            f"Could not decode catalog row while reading {stage} for {target}: {detail}\n\n"
            f"Suggestions:\n"
            f"1. Check the server version is supported\n"
            f"2. Report the catalog row shape with the server version",
            table,
            stage,
        )


class SchemaNotFoundError(FraiseQLIntrospectError):
    """Schema does not exist in database."""

    def __init__(self, schema: str):
        self.schema = schema
        super().__init__(
            f"Schema '{schema}' not found in database.\n\n"
            f"Suggestions:\n"
            f"1. Check schema name spelling\n"
            f"2. Ensure schema exists: CREATE SCHEMA {schema};\n"
            f"3. Check database connection settings"
        )


class TableNotFoundError(FraiseQLIntrospectError):
    """Table does not exist in schema."""

    def __init__(self, table: str, schema: str):
        self.table = table
        self.schema = schema
        super().__init__(
            f"Table '{table}' not found in schema '{schema}'.\n\n"
            f"Suggestions:\n"
            f"1. Check table name spelling\n"
            f"2. Use SchemaIntrospector.get_table_names() to see available tables\n"
            f"3. Ensure table exists: CREATE TABLE {schema}.{table} (...);"
        )


class SchemaInvariantError(FraiseQLIntrospectError):
    """Introspected model violates a structural invariant."""

    pass


class TypeMapError(FraiseQLIntrospectError):
    """Type map declaration is incomplete or ambiguous."""

    pass


class DialectNotFoundError(FraiseQLIntrospectError):
    """No introspector registered for a dialect."""

    def __init__(self, dialect: str, available: list[str]):
        available_str = ", ".join(sorted(available)) or "(none)"
        super().__init__(
            f"No introspector registered for dialect '{dialect}'.\n\n"
            f"Available dialects: {available_str}\n\n"
            f"Suggestions:\n"
            f"1. Check the dialect name in fraiseql-introspect.toml\n"
            f"2. Register one: register_introspector('{dialect}', MyIntrospector)"
        )
