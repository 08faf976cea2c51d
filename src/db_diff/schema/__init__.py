"""Schema snapshots and structural comparison.

Provides live database introspection (``SchemaIntrospector``), snapshot
comparison (``compare``) and JSON persistence (``save_snapshot``,
``load_snapshot``).

Usage:
    from db_diff.schema import compare, SchemaIntrospector
    from db_diff.schema import load_snapshot, save_snapshot
"""

from db_diff.schema.comparator import compare, ordered_union
from db_diff.schema.introspector import SchemaIntrospector
from db_diff.schema.models import (
    COLUMN_ATTRIBUTES,
    ColumnSchema,
    ComparisonResult,
    DiffReport,
    Snapshot,
    TableSchema,
)
from db_diff.schema.store import dump_snapshot, load_snapshot, save_snapshot

__all__ = [
    "compare",
    "ordered_union",
    "SchemaIntrospector",
    "COLUMN_ATTRIBUTES",
    "ColumnSchema",
    "TableSchema",
    "Snapshot",
    "DiffReport",
    "ComparisonResult",
    "dump_snapshot",
    "load_snapshot",
    "save_snapshot",
]
