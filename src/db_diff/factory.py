"""Snapshot capture and profile-to-profile comparison.

Resolves db.toml profiles into connection URLs, captures one ``Snapshot``
per database, and compares two captures.

Usage:
    from db_diff.factory import compare_profiles, export

    snapshot = export(
        {"host": "localhost", "user": "root", "password": "", "name": "app"},
        "local",
    )

    result = compare_profiles("staging", "production")
    if result.success and not result.report.identical:
        print(result.report.format_report())
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sqlalchemy.engine import URL

from db_diff.config.loader import load_db_config
from db_diff.config.models import DatabaseConfig, DatabaseProfile
from db_diff.schema.comparator import compare
from db_diff.schema.introspector import SchemaIntrospector
from db_diff.schema.models import ComparisonResult, Snapshot

logger = logging.getLogger(__name__)

DRIVER = "mysql+pymysql"


class ProfileNotFoundError(Exception):
    """Raised when a requested database profile is not configured."""

    pass


# ============================================================================
# Profile Resolution
# ============================================================================


def resolve_url(profile: DatabaseProfile) -> URL:
    """Build the SQLAlchemy connection URL for a profile.

    Args:
        profile: Database profile from config

    Returns:
        ``URL`` with credentials escaped by SQLAlchemy
    """
    return URL.create(
        DRIVER,
        username=profile.user,
        password=profile.resolve_password(),
        host=profile.host,
        port=profile.port,
        database=profile.name,
    )


def get_profile(
    profile_name: str,
    config: DatabaseConfig,
) -> DatabaseProfile:
    """Look up a profile by name.

    Raises:
        ProfileNotFoundError: If the profile is not in the config
    """
    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys()) or "(none)"
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found. Available: {available}"
        )
    return config.profiles[profile_name]


# ============================================================================
# Snapshot Capture
# ============================================================================


def export(
    connection_config: DatabaseProfile | Mapping[str, Any],
    label: str,
    connect_timeout: int = 10,
) -> Snapshot:
    """Capture the schema of one database as a ``Snapshot``.

    Opens a single connection, lists every base table, reads each table's
    columns, and closes the connection before returning, whether or not
    the capture succeeded.

    Args:
        connection_config: ``DatabaseProfile`` or a mapping with ``host``,
            ``user``, ``password`` and ``name`` (database to select).
        label: Display name for the snapshot, used in diff messages.
        connect_timeout: Seconds to wait for the server on connect.

    Returns:
        Snapshot with one entry per table, in server order.

    Raises:
        ConnectionError: If the connection cannot be opened, the database
            cannot be selected, or the connection drops mid-capture.

    Example:
        >>> snapshot = export(profile, "staging")  # doctest: +SKIP
        >>> snapshot.table_names  # doctest: +SKIP
        ['orders', 'users']
    """
    if not isinstance(connection_config, DatabaseProfile):
        connection_config = DatabaseProfile.model_validate(connection_config)

    captured_at = datetime.now(timezone.utc)
    url = resolve_url(connection_config)

    logger.debug(
        "Capturing schema '%s' from %s:%s/%s",
        label,
        connection_config.host,
        connection_config.port,
        connection_config.name,
    )

    with SchemaIntrospector(url, connect_timeout=connect_timeout) as introspector:
        tables = introspector.introspect()

    logger.info("Captured %d tables for '%s'", len(tables), label)
    return Snapshot(label=label, captured_at=captured_at, tables=tables)


def export_profile(
    profile_name: str,
    label: str | None = None,
    config_path: str | Path | None = None,
) -> Snapshot:
    """Capture a snapshot for a named db.toml profile.

    Args:
        profile_name: Profile name from db.toml.
        label: Snapshot label (default: the profile name).
        config_path: Path to db.toml (default: ``default_config_path()``).

    Raises:
        FileNotFoundError: If db.toml doesn't exist
        ProfileNotFoundError: If the profile is not configured
        ConnectionError: If the database cannot be reached
    """
    config = load_db_config(config_path)
    profile = get_profile(profile_name, config)
    return export(
        profile,
        label or profile_name,
        connect_timeout=config.connect_timeout,
    )


# ============================================================================
# Comparison
# ============================================================================


def compare_profiles(
    profile_a: str,
    profile_b: str,
    config_path: str | Path | None = None,
) -> ComparisonResult:
    """Capture two profiles and compare their schemas.

    No comparison is attempted unless both captures succeed.

    Args:
        profile_a: First profile name from db.toml
        profile_b: Second profile name from db.toml
        config_path: Path to db.toml (default: ``default_config_path()``)

    Returns:
        ComparisonResult with the diff report, or the capture error

    Example:
        >>> result = compare_profiles("staging", "production")  # doctest: +SKIP
        >>> result.report.identical  # doctest: +SKIP
        True
    """
    snapshots: list[Snapshot] = []
    for profile_name in (profile_a, profile_b):
        try:
            snapshots.append(export_profile(profile_name, config_path=config_path))
        except (FileNotFoundError, ValueError, KeyError, ProfileNotFoundError) as e:
            return ComparisonResult(success=False, error=str(e))
        except ConnectionError as e:
            logger.warning("Snapshot capture failed for '%s': %s", profile_name, e)
            return ComparisonResult(
                success=False,
                error=f"Could not capture a snapshot for database '{profile_name}': {e}",
            )

    report = compare(snapshots[0], snapshots[1])
    return ComparisonResult(success=True, report=report)
