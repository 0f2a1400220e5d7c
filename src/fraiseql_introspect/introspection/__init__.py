"""Schema introspectors per database engine."""

from fraiseql_introspect.introspection.base import (
    DEFAULT_EXCLUDE_TABLES,
    BaseIntrospector,
    is_excluded,
)
from fraiseql_introspect.introspection.postgres import PostgresIntrospector
from fraiseql_introspect.introspection.registry import (
    get_introspector,
    list_dialects,
    register_introspector,
    reset_introspectors,
)

# PostgreSQL is the reference engine
SchemaIntrospector = PostgresIntrospector

__all__ = [
    "DEFAULT_EXCLUDE_TABLES",
    "BaseIntrospector",
    "PostgresIntrospector",
    "SchemaIntrospector",
    "get_introspector",
    "is_excluded",
    "list_dialects",
    "register_introspector",
    "reset_introspectors",
]
