"""Dialect registry mapping engine names to introspector classes."""

from fraiseql_introspect.exceptions import DialectNotFoundError
from fraiseql_introspect.introspection.base import BaseIntrospector
from fraiseql_introspect.introspection.postgres import PostgresIntrospector


class IntrospectorRegistry:
    """Registry for engine-specific introspectors."""

    def __init__(self):
        self._introspectors: dict[str, type[BaseIntrospector]] = {}

    def register(self, dialect: str, introspector_class: type) -> None:
        """
        Register an introspector for a dialect.

        Args:
            dialect: Dialect name (e.g. "postgresql")
            introspector_class: BaseIntrospector subclass

        Raises:
            ValueError: If class is not a BaseIntrospector subclass
        """
        is_class = isinstance(introspector_class, type)
        if not (is_class and issubclass(introspector_class, BaseIntrospector)):
            raise ValueError(
                f"Introspector class must subclass BaseIntrospector. "
                f"Got {introspector_class!r}."
            )
        self._introspectors[dialect] = introspector_class

    def get(self, dialect: str) -> type[BaseIntrospector]:
        """
        Get introspector class by dialect.

        Raises:
            DialectNotFoundError: If dialect isn't registered
        """
        if dialect not in self._introspectors:
            raise DialectNotFoundError(dialect, self.list_dialects())
        return self._introspectors[dialect]

    def list_dialects(self) -> list[str]:
        return list(self._introspectors.keys())

    def clear(self) -> None:
        """Clear all registered introspectors (for testing)."""
        self._introspectors.clear()


def _register_builtins(registry: IntrospectorRegistry) -> None:
    registry.register("postgresql", PostgresIntrospector)
    registry.register("postgres", PostgresIntrospector)


def _default_registry() -> IntrospectorRegistry:
    registry = IntrospectorRegistry()
    _register_builtins(registry)
    return registry


# Global registry instance
_registry = _default_registry()


def register_introspector(dialect: str, introspector_class: type) -> None:
    """
    Register an introspector for another engine (user-facing API).

    Example:
        >>> class MySQLIntrospector(BaseIntrospector):
        ...     dialect = "mysql"
        ...     type_map = MYSQL_TYPE_MAP
        ...     def list_table_names(self): ...
        >>>
        >>> register_introspector("mysql", MySQLIntrospector)
    """
    _registry.register(dialect, introspector_class)


def get_introspector(conn, dialect: str = "postgresql", **kwargs) -> BaseIntrospector:
    """
    Build an introspector for a dialect around an open connection.

    Args:
        conn: Open database connection
        dialect: Registered dialect name
        **kwargs: Passed to the introspector (schema, exclude_tables, ...)

    Raises:
        DialectNotFoundError: If dialect isn't registered
    """
    return _registry.get(dialect)(conn, **kwargs)


def list_dialects() -> list[str]:
    return _registry.list_dialects()


def reset_introspectors() -> None:
    """Restore the built-in registrations (for testing)."""
    _registry.clear()
    _register_builtins(_registry)
