"""Pydantic models for database configuration."""

import os

from pydantic import BaseModel


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseProfile(BaseModel):
    """Database connection profile from db.toml."""

    host: str
    user: str
    name: str  # database to select
    password: str | None = None
    password_env: str | None = None  # env var holding the password
    port: int = 3306
    description: str = ""

    def resolve_password(self) -> str:
        """Return the password, reading ``password_env`` when set.

        An explicit ``password`` wins over ``password_env``.

        Raises:
            KeyError: If ``password_env`` names an unset variable.
        """
        if self.password is not None:
            return self.password
        if self.password_env:
            try:
                return os.environ[self.password_env]
            except KeyError:
                raise KeyError(
                    f"Environment variable '{self.password_env}' is not set"
                ) from None
        return ""


class DatabaseConfig(BaseModel):
    """Complete database configuration from db.toml."""

    profiles: dict[str, DatabaseProfile]
    connect_timeout: int = 10
