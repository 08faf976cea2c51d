"""db-diff: Schema drift detection for relational databases.

Captures a database's tables and column definitions into a portable
snapshot, and compares two snapshots to report every structural
difference.

Usage:
    from db_diff import export, compare, Snapshot
    from db_diff import load_snapshot, save_snapshot
    from db_diff import load_db_config, DatabaseProfile, DatabaseConfig
"""

__version__ = "0.1.0"

# Config
from db_diff.config.loader import load_db_config
from db_diff.config.models import DatabaseConfig, DatabaseProfile

# Factory
from db_diff.factory import (
    ProfileNotFoundError,
    compare_profiles,
    export,
    export_profile,
    resolve_url,
)

# Schema
from db_diff.schema.comparator import compare
from db_diff.schema.introspector import SchemaIntrospector
from db_diff.schema.models import (
    ColumnSchema,
    ComparisonResult,
    DiffReport,
    Snapshot,
    TableSchema,
)
from db_diff.schema.store import load_snapshot, save_snapshot

__all__ = [
    # Config
    "load_db_config",
    "DatabaseProfile",
    "DatabaseConfig",
    # Factory
    "export",
    "export_profile",
    "compare_profiles",
    "resolve_url",
    "ProfileNotFoundError",
    # Schema
    "compare",
    "SchemaIntrospector",
    "ColumnSchema",
    "TableSchema",
    "Snapshot",
    "DiffReport",
    "ComparisonResult",
    "load_snapshot",
    "save_snapshot",
]
