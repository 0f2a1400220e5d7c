"""
Configuration management for fraiseql-introspect.

Loads and validates configuration from fraiseql-introspect.toml files using Pydantic.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from fraiseql_introspect.introspection.base import DEFAULT_EXCLUDE_TABLES
from fraiseql_introspect.introspection.registry import get_introspector

if TYPE_CHECKING:
    from fraiseql_introspect.introspection.base import BaseIntrospector

CONFIG_FILENAME = "fraiseql-introspect.toml"


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = Field(
        default="postgresql://localhost/postgres",
        description="PostgreSQL connection URL (used by the CLI only)",
    )
    schema_name: str = Field(
        default="public", alias="schema", description="Schema to introspect"
    )
    dialect: str = Field(default="postgresql", description="Registered dialect name")

    model_config = ConfigDict(populate_by_name=True)


class IntrospectionConfig(BaseModel):
    """Table selection configuration."""

    exclude_tables: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_TABLES),
        description="Glob patterns for bookkeeping tables to skip",
    )
    include_views: bool = Field(
        default=False, description="List views alongside base tables"
    )


class OutputConfig(BaseModel):
    """JSON output configuration."""

    indent: int = Field(default=2, description="JSON indentation")


class Config(BaseSettings):
    """Main configuration for fraiseql-introspect."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    introspection: IntrospectionConfig = Field(default_factory=IntrospectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config = SettingsConfigDict(
        env_prefix="FRAISEQL_INTROSPECT_", env_nested_delimiter="__"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment variables take precedence over values loaded from TOML
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Args:
            path: Path to fraiseql-introspect.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from fraiseql-introspect.toml.

        Searches for fraiseql-introspect.toml starting from start_dir and walking
        up parent directories until found or reaching filesystem root.

        Raises:
            FileNotFoundError: If no config file found
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILENAME} found in {start_dir} or parent directories. "
            f"Run 'fraiseql-introspect init' to create one."
        )

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write fraiseql-introspect.toml
        """
        config_path = Path(path)
        exclude = ", ".join(f'"{p}"' for p in self.introspection.exclude_tables)

        # Build TOML content manually for better formatting
        toml_content = f"""# fraiseql-introspect configuration

[database]
url = "{self.database.url}"
schema = "{self.database.schema_name}"
dialect = "{self.database.dialect}"

[introspection]
exclude_tables = [{exclude}]
include_views = {str(self.introspection.include_views).lower()}

[output]
indent = {self.output.indent}
"""

        config_path.write_text(toml_content)

    def create_introspector(self, conn) -> BaseIntrospector:
        """Build the configured introspector around an open connection."""
        return get_introspector(
            conn,
            dialect=self.database.dialect,
            schema=self.database.schema_name,
            exclude_tables=self.introspection.exclude_tables,
            include_views=self.introspection.include_views,
        )


# Default configuration instance
DEFAULT_CONFIG = Config()
