"""
fraiseql-introspect - PostgreSQL Schema Model for Code Generators

Reads tables, columns, primary keys and foreign keys from the catalog and
annotates every column with a portable type tag.
"""

from fraiseql_introspect.exceptions import (
    FraiseQLIntrospectError,
    IntrospectionConnectionError,
    QueryError,
    ScanError,
    SchemaNotFoundError,
    TableNotFoundError,
)
from fraiseql_introspect.introspection import (
    BaseIntrospector,
    PostgresIntrospector,
    SchemaIntrospector,
    get_introspector,
    register_introspector,
)
from fraiseql_introspect.models import (
    Column,
    ForeignKey,
    PrimaryKey,
    Table,
    tables_to_json,
)
from fraiseql_introspect.type_mapping import PortableType, TypeMap, translate_column_type

__version__ = "0.1.0"

__all__ = [
    "BaseIntrospector",
    "Column",
    "ForeignKey",
    "FraiseQLIntrospectError",
    "IntrospectionConnectionError",
    "PortableType",
    "PostgresIntrospector",
    "PrimaryKey",
    "QueryError",
    "ScanError",
    "SchemaIntrospector",
    "SchemaNotFoundError",
    "Table",
    "TableNotFoundError",
    "TypeMap",
    "get_introspector",
    "register_introspector",
    "tables_to_json",
    "translate_column_type",
]
