"""TOML loader for database profiles.

Usage:
    from db_diff.config.loader import load_db_config

    config = load_db_config()
    profile = config.profiles["staging"]
"""

import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from db_diff.config.models import DatabaseConfig, DatabaseProfile

CONFIG_ENV_VAR = "DB_DIFF_CONFIG"


def default_config_path() -> Path:
    """Return ``$DB_DIFF_CONFIG`` if set, else ``db.toml`` in the working directory."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / "db.toml"


def load_db_config(config_path: str | Path | None = None) -> DatabaseConfig:
    """Load database configuration from TOML file.

    Args:
        config_path: Path to db.toml (default: ``default_config_path()``)

    Returns:
        DatabaseConfig with all profiles

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    config_path = Path(config_path) if config_path is not None else default_config_path()

    if not config_path.exists():
        raise FileNotFoundError(
            f"Database config not found: {config_path}\n"
            f"Create a db.toml with one [profiles.<name>] table per database."
        )

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path.name}: {e}") from e

    schema_settings = data.get("schema", {})

    try:
        profiles = {
            name: DatabaseProfile(**profile_data)
            for name, profile_data in data.get("profiles", {}).items()
        }
        return DatabaseConfig(
            profiles=profiles,
            connect_timeout=schema_settings.get("connect_timeout", 10),
        )
    except ValidationError as e:
        raise ValueError(f"Invalid database config in {config_path.name}: {e}") from e
