"""
Native column type to portable type tag translation.

Each engine declares a TypeMap assigning its native type names to a small set
of categories. A category resolves to one portable tag for NOT NULL columns
and (optionally) a second one for nullable columns. Anything the map does not
know about degrades to the text tags instead of failing.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from fraiseql_introspect.exceptions import TypeMapError

logger = logging.getLogger(__name__)


class PortableType(str, Enum):
    """Engine-independent column type tags consumed by code generators."""

    INT64 = "int64"
    STRING = "string"
    BYTES = "bytes"
    BOOL = "bool"
    TIMESTAMP = "timestamp"
    FLOAT64 = "float64"
    NULL_INT64 = "null_int64"
    NULL_STRING = "null_string"
    NULL_BOOL = "null_bool"
    NULL_TIMESTAMP = "null_timestamp"
    NULL_FLOAT64 = "null_float64"

    def __str__(self) -> str:
        return self.value

    @property
    def is_nullable(self) -> bool:
        return self.value.startswith("null_")


class TypeCategory(str, Enum):
    """Buckets of native types sharing a portable representation."""

    INTEGER = "integer"
    TEXT = "text"
    BINARY = "binary"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    NUMERIC = "numeric"


# (NOT NULL tag, nullable tag). Binary has no nullable counterpart.
CATEGORY_TAGS: dict[TypeCategory, tuple[PortableType, PortableType | None]] = {
    TypeCategory.INTEGER: (PortableType.INT64, PortableType.NULL_INT64),
    TypeCategory.TEXT: (PortableType.STRING, PortableType.NULL_STRING),
    TypeCategory.BINARY: (PortableType.BYTES, None),
    TypeCategory.BOOLEAN: (PortableType.BOOL, PortableType.NULL_BOOL),
    TypeCategory.TEMPORAL: (PortableType.TIMESTAMP, PortableType.NULL_TIMESTAMP),
    TypeCategory.NUMERIC: (PortableType.FLOAT64, PortableType.NULL_FLOAT64),
}

DEFAULT_TAGS: tuple[PortableType, PortableType] = (
    PortableType.STRING,
    PortableType.NULL_STRING,
)


def normalize_type_name(native_type: str) -> str:
    """Lowercase and collapse whitespace (e.g. 'Character  Varying')."""
    return " ".join(native_type.split()).lower()


@dataclass(frozen=True)
class TypeMap:
    """
    Declarative native type lookup for one engine.

    Attributes:
        dialect: Engine name the map belongs to
        categories: Native type names per category

    Raises:
        TypeMapError: If a category is missing or a name is claimed twice
    """

    dialect: str
    categories: dict[TypeCategory, frozenset[str]]
    _lookup: dict[str, TypeCategory] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        missing = [c.value for c in TypeCategory if c not in self.categories]
        if missing:
            raise TypeMapError(
                f"Type map '{self.dialect}' is missing categories: {', '.join(missing)}"
            )

        lookup: dict[str, TypeCategory] = {}
        for category, names in self.categories.items():
            for name in names:
                key = normalize_type_name(name)
                if key in lookup and lookup[key] is not category:
                    raise TypeMapError(
                        f"Type map '{self.dialect}' assigns '{key}' to both "
                        f"'{lookup[key].value}' and '{category.value}'"
                    )
                lookup[key] = category
        object.__setattr__(self, "_lookup", lookup)

    def category_of(self, native_type: str) -> TypeCategory | None:
        """Return the category for a native type, or None if unknown."""
        return self._lookup.get(normalize_type_name(native_type))

    def translate(self, native_type: str, is_nullable: bool) -> PortableType:
        """Map a native type and nullability to a portable tag."""
        category = self.category_of(native_type)
        if category is None:
            logger.debug(
                f"Unknown {self.dialect} type '{native_type}', using default text tag"
            )
            return DEFAULT_TAGS[1] if is_nullable else DEFAULT_TAGS[0]

        not_null_tag, nullable_tag = CATEGORY_TAGS[category]
        if not is_nullable:
            return not_null_tag
        if nullable_tag is None:
            return DEFAULT_TAGS[1]
        return nullable_tag


POSTGRES_TYPE_MAP = TypeMap(
    dialect="postgresql",
    categories={
        TypeCategory.INTEGER: frozenset(
            {"bigint", "bigserial", "integer", "smallint", "smallserial", "serial"}
        ),
        TypeCategory.TEXT: frozenset(
            {
                "bit",
                "bit varying",
                "character",
                "character varying",
                "cidr",
                "inet",
                "json",
                "jsonb",
                "macaddr",
                "text",
                "uuid",
                "xml",
            }
        ),
        TypeCategory.BINARY: frozenset({"bytea"}),
        TypeCategory.BOOLEAN: frozenset({"boolean"}),
        TypeCategory.TEMPORAL: frozenset(
            {
                "date",
                "interval",
                "time",
                "time without time zone",
                "time with time zone",
                "timestamp",
                "timestamp without time zone",
                "timestamp with time zone",
            }
        ),
        TypeCategory.NUMERIC: frozenset({"double precision", "money", "numeric", "real"}),
    },
)


def translate_column_type(
    native_type: str,
    is_nullable: bool,
    type_map: TypeMap = POSTGRES_TYPE_MAP,
) -> PortableType:
    """
    Convert a native column type to a portable type tag.

    Args:
        native_type: Type name as reported by the catalog (e.g. "character varying")
        is_nullable: Whether the column allows NULL
        type_map: Engine type map (PostgreSQL by default)

    Returns:
        Portable type tag. Unknown types map to string/null_string.

    Example:
        >>> translate_column_type("bigint", is_nullable=False)
        <PortableType.INT64: 'int64'>
        >>> translate_column_type("bytea", is_nullable=True)
        <PortableType.NULL_STRING: 'null_string'>
    """
    return type_map.translate(native_type, is_nullable)
