"""Structural comparison of two schema snapshots.

Walks the ordered union of table names, then the ordered union of column
names in each shared table, then every ``SHOW COLUMNS`` attribute of each
shared column. A table or column missing on one side is reported once and
not compared any further.
Pure logic -- no I/O, no database connections.

Usage:
    from db_diff.schema.comparator import compare

    report = compare(staging_snapshot, production_snapshot)
    if report.identical:
        print("Schemas match")
    else:
        print(report.format_report())
"""

from collections.abc import Collection, Iterable, Mapping
from typing import Any, TypeVar

from db_diff.schema.models import (
    COLUMN_ATTRIBUTES,
    ColumnSchema,
    DiffReport,
    Snapshot,
    TableSchema,
)

K = TypeVar("K")


def ordered_union(first: Iterable[K], second: Iterable[K]) -> list[K]:
    """Merge two key sequences, keeping first-appearance order.

    Examples:
        >>> ordered_union(["b", "a"], ["a", "c", "b", "d"])
        ['b', 'a', 'c', 'd']
    """
    merged: dict[K, None] = dict.fromkeys(first)
    for key in second:
        merged.setdefault(key, None)
    return list(merged)


def _as_snapshot(value: Snapshot | Mapping[str, Any], default_label: str) -> Snapshot:
    if isinstance(value, Snapshot):
        return value
    if isinstance(value, Mapping) and "label" not in value:
        value = {**value, "label": default_label}
    return Snapshot.model_validate(value)


def _as_number(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _values_equal(
    attribute: str,
    value_a: str | None,
    value_b: str | None,
    loose_attributes: Collection[str],
) -> bool:
    if value_a == value_b:
        return True
    if attribute in loose_attributes:
        number_a = _as_number(value_a)
        number_b = _as_number(value_b)
        return number_a is not None and number_a == number_b
    return False


def _render(value: str | None) -> str:
    return "NULL" if value is None else f"'{value}'"


def _compare_columns(
    column_a: ColumnSchema,
    column_b: ColumnSchema,
    label_a: str,
    label_b: str,
    loose_attributes: Collection[str],
) -> list[str]:
    messages: list[str] = []
    for attribute in COLUMN_ATTRIBUTES:
        value_a = column_a.get(attribute)
        value_b = column_b.get(attribute)
        if _values_equal(attribute, value_a, value_b, loose_attributes):
            continue
        messages.append(
            f"Field {column_a.field} differs between databases for parameter "
            f"'{attribute}'. {label_a} has {_render(value_a)} and "
            f"{label_b} has {_render(value_b)}."
        )
    return messages


def _compare_tables(
    table_a: TableSchema,
    table_b: TableSchema,
    label_a: str,
    label_b: str,
    loose_attributes: Collection[str],
) -> list[str]:
    messages: list[str] = []
    for column_name in ordered_union(table_a.columns, table_b.columns):
        column_a = table_a.columns.get(column_name)
        column_b = table_b.columns.get(column_name)

        if column_a is None:
            messages.append(f"{label_a} is missing field {column_name}.")
            continue
        if column_b is None:
            messages.append(f"{label_b} is missing field {column_name}.")
            continue

        messages.extend(
            _compare_columns(column_a, column_b, label_a, label_b, loose_attributes)
        )
    return messages


def compare(
    snapshot_a: Snapshot | Mapping[str, Any],
    snapshot_b: Snapshot | Mapping[str, Any],
    *,
    loose_attributes: Collection[str] = (),
) -> DiffReport:
    """Compare two snapshots and report every structural discrepancy.

    Tables are visited in first-appearance order across *snapshot_a* then
    *snapshot_b*; columns likewise within each shared table. For each:

    - a table missing on one side yields exactly one message and no
      column-level messages
    - a column missing on one side yields exactly one message and no
      attribute-level messages
    - each differing attribute of a shared column yields its own message

    Neither input is modified. Labels and capture times only appear in
    messages; they never affect the outcome.

    Args:
        snapshot_a: First snapshot, or a mapping in the serialized snapshot
            shape (validated into a ``Snapshot``). A mapping without a
            ``label`` is labelled ``A``.
        snapshot_b: Second snapshot, same rules as *snapshot_a*; an
            unlabelled mapping is labelled ``B``.
        loose_attributes: Attribute names (``SHOW COLUMNS`` spelling) whose
            values compare numerically when both sides parse as numbers.
            Every other attribute uses strict string equality.

    Returns:
        ``DiffReport`` holding messages only for tables that differ.

    Raises:
        pydantic.ValidationError: If a mapping input is not a valid snapshot.

    Examples:
        >>> a = {"label": "A", "tables": {"users": {"id": {"Type": "int(11)"}}}}
        >>> compare(a, a).identical
        True

        >>> b = {"label": "B", "tables": {}}
        >>> compare(a, b).tables
        {'users': ['B is missing table users.']}
    """
    snapshot_a = _as_snapshot(snapshot_a, "A")
    snapshot_b = _as_snapshot(snapshot_b, "B")
    label_a = snapshot_a.label
    label_b = snapshot_b.label

    results: dict[str, list[str]] = {}

    for table_name in ordered_union(snapshot_a.tables, snapshot_b.tables):
        table_a = snapshot_a.tables.get(table_name)
        table_b = snapshot_b.tables.get(table_name)

        if table_a is None:
            results[table_name] = [f"{label_a} is missing table {table_name}."]
            continue
        if table_b is None:
            results[table_name] = [f"{label_b} is missing table {table_name}."]
            continue

        messages = _compare_tables(table_a, table_b, label_a, label_b, loose_attributes)
        if messages:
            results[table_name] = messages

    return DiffReport(label_a=label_a, label_b=label_b, tables=results)
