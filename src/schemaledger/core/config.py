"""Configuration management for schemaledger."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigError

CONFIG_ENV_VAR = "SCHEMALEDGER_CONFIG"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _parse_flag(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUTHY:
            return True
        if text in _FALSY:
            return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


@dataclass
class Config:
    """Main application configuration."""

    database_url: str = "sqlite:///schemaledger.db"
    migrations_dir: Path = Path("migrations")
    ledger_table: str = "schema_migrations"
    suffix: str = ".sql"
    strict_order: bool = False  # Refuse pending migrations older than the latest applied

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()
        config._apply_env()
        return config

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from a TOML file, then apply env overrides.

        Args:
            path: Path to the TOML configuration file.

        Returns:
            Config instance.

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

        config = cls()

        if "database_url" in data:
            config.database_url = str(data["database_url"])
        if "migrations_dir" in data:
            config.migrations_dir = Path(data["migrations_dir"])
        if "ledger_table" in data:
            config.ledger_table = str(data["ledger_table"])
        if "suffix" in data:
            config.suffix = str(data["suffix"])
        if "strict_order" in data:
            config.strict_order = _parse_flag("strict_order", data["strict_order"])

        config._apply_env()
        return config

    @classmethod
    def from_env_or_file(cls, path: Path | None = None) -> "Config":
        """Load from an explicit file, the SCHEMALEDGER_CONFIG file, or env only."""
        if path is None and (env_path := os.environ.get(CONFIG_ENV_VAR)):
            path = Path(env_path)

        if path is not None:
            return cls.from_file(path)
        return cls.from_env()

    def _apply_env(self) -> None:
        if url := os.environ.get("SCHEMALEDGER_DATABASE_URL"):
            self.database_url = url

        if directory := os.environ.get("SCHEMALEDGER_MIGRATIONS_DIR"):
            self.migrations_dir = Path(directory)

        if table := os.environ.get("SCHEMALEDGER_LEDGER_TABLE"):
            self.ledger_table = table

        if (strict := os.environ.get("SCHEMALEDGER_STRICT_ORDER")) is not None:
            self.strict_order = strict.strip().lower() in _TRUTHY
