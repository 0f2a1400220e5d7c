"""Data models and type definitions."""

import json
from dataclasses import dataclass
from typing import Any

from fraiseql_introspect.exceptions import SchemaInvariantError
from fraiseql_introspect.type_mapping import PortableType


@dataclass(frozen=True)
class Column:
    """
    Column metadata from database introspection.

    Attributes:
        name: Column name
        type: Portable type tag (see PortableType)
        is_nullable: Whether column allows NULL values
        is_primary_key: Whether column participates in the primary key
        native_type: Data type as reported by the catalog
    """

    name: str
    type: PortableType
    is_nullable: bool
    is_primary_key: bool = False
    native_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "is_nullable": self.is_nullable,
            "is_primary_key": self.is_primary_key,
            "native_type": self.native_type,
        }


@dataclass(frozen=True)
class PrimaryKey:
    """
    Primary key constraint.

    Attributes:
        name: Constraint name
        columns: Key column names in declared key order (stored as a tuple)
    """

    name: str
    columns: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        if not self.columns:
            raise SchemaInvariantError(f"Primary key '{self.name}' has no columns")

    @property
    def is_composite(self) -> bool:
        return len(self.columns) > 1

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns)}


@dataclass(frozen=True)
class ForeignKey:
    """
    Foreign key relationship metadata.

    Attributes:
        name: Constraint name
        column: Foreign key column name in this table
        foreign_table: Table being referenced
        foreign_column: Referenced column in that table
    """

    name: str
    column: str
    foreign_table: str
    foreign_column: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "column": self.column,
            "foreign_table": self.foreign_table,
            "foreign_column": self.foreign_column,
        }


@dataclass(frozen=True)
class Table:
    """
    Table metadata assembled from the catalog.

    Attributes:
        name: Table name
        columns: Columns in catalog declaration order (stored as a tuple)
        primary_key: Primary key, or None for a keyless table
        foreign_keys: Foreign key relationships, possibly empty (stored as a tuple)

    Raises:
        SchemaInvariantError: If a key references a column the table lacks
    """

    name: str
    columns: tuple[Column, ...]
    primary_key: PrimaryKey | None = None
    foreign_keys: tuple[ForeignKey, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "foreign_keys", tuple(self.foreign_keys))

        names = set(self.column_names)

        if self.primary_key is not None:
            unknown = [c for c in self.primary_key.columns if c not in names]
            if unknown:
                raise SchemaInvariantError(
                    f"Primary key '{self.primary_key.name}' on '{self.name}' "
                    f"references unknown columns: {', '.join(unknown)}"
                )

        for fk in self.foreign_keys:
            if fk.column not in names:
                raise SchemaInvariantError(
                    f"Foreign key '{fk.name}' on '{self.name}' "
                    f"references unknown column '{fk.column}'"
                )

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def primary_key_columns(self) -> list[str]:
        """Primary key column names in key order (empty if keyless)."""
        if self.primary_key is None:
            return []
        return list(self.primary_key.columns)

    def get_column(self, name: str) -> Column | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def has_self_reference(self) -> bool:
        """Check if table has a foreign key pointing back at itself."""
        return any(fk.foreign_table == self.name for fk in self.foreign_keys)

    def get_self_referencing_fks(self) -> list[ForeignKey]:
        """Get all self-referencing foreign keys."""
        return [fk for fk in self.foreign_keys if fk.foreign_table == self.name]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "primary_key": self.primary_key.to_dict() if self.primary_key else None,
            "foreign_keys": [fk.to_dict() for fk in self.foreign_keys],
        }


def tables_to_json(tables: list[Table], indent: int | None = 2) -> str:
    """
    Serialize introspected tables to JSON.

    Args:
        tables: Tables returned by an introspector
        indent: JSON indentation (None for compact output)

    Returns:
        JSON array with one object per table, in input order
    """
    return json.dumps([t.to_dict() for t in tables], indent=indent)
