"""Pydantic models for schema snapshots and comparison results.

This module contains schema-domain models:
- Snapshot models: ColumnSchema, TableSchema, Snapshot
- Comparison models: DiffReport, ComparisonResult

Configuration models (DatabaseProfile, DatabaseConfig) live in
db_diff.config.models.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    field_serializer,
    field_validator,
    model_validator,
)


# Attribute names as reported by MySQL ``SHOW COLUMNS``, in comparison order.
COLUMN_ATTRIBUTES: tuple[str, ...] = ("Field", "Type", "Null", "Key", "Default", "Extra")


# ============================================================================
# Snapshot Models
# ============================================================================


class ColumnSchema(BaseModel):
    """Schema for a database column, one row of ``SHOW COLUMNS``.

    Attributes are stored under Python names and serialized under the
    ``SHOW COLUMNS`` names. Any attribute other than ``Field`` may be unset.

    Example:
        >>> col = ColumnSchema(Field="id", Type="int(11)", Null="NO", Key="PRI")
        >>> col.default is None
        True
        >>> col.get("Type")
        'int(11)'
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    field: str = Field(alias="Field")
    type: str | None = Field(default=None, alias="Type")
    null: str | None = Field(default=None, alias="Null")
    key: str | None = Field(default=None, alias="Key")
    default: str | None = Field(default=None, alias="Default")
    extra: str | None = Field(default=None, alias="Extra")

    @field_validator("*", mode="before")
    @classmethod
    def _decode_bytes(cls, value: Any) -> Any:
        # Some drivers hand back Type and Default as bytes
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8")
        return value

    def get(self, attribute: str) -> str | None:
        """Look up an attribute by its ``SHOW COLUMNS`` name."""
        return getattr(self, attribute.lower())

    def to_row(self) -> dict[str, str | None]:
        """Return the column as a ``SHOW COLUMNS`` style mapping."""
        return self.model_dump(by_alias=True)


def _with_field(column_name: str, row: Any) -> Any:
    # A serialized column may leave Field out; its map key names it
    if isinstance(row, Mapping) and "Field" not in row and "field" not in row:
        return {**row, "Field": column_name}
    return row


def _as_table(table_name: str, table: Any) -> Any:
    """Normalize one ``tables`` entry into TableSchema input.

    Accepts a TableSchema, the ``{"name": ..., "columns": {...}}`` form, or
    the serialized form: a bare map of column name to ``SHOW COLUMNS`` row.
    """
    if isinstance(table, TableSchema) or not isinstance(table, Mapping):
        return table
    # In a bare column map every value is a row, never a string
    if isinstance(table.get("name"), str):
        columns = table.get("columns", {})
        if isinstance(columns, Mapping):
            columns = {name: _with_field(name, row) for name, row in columns.items()}
        return {**table, "columns": columns}
    return {
        "name": table_name,
        "columns": {name: _with_field(name, row) for name, row in table.items()},
    }


def _read_only(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


def _dump_columns(
    columns: Mapping[str, ColumnSchema], by_alias: bool | None
) -> dict[str, dict[str, str | None]]:
    return {name: column.model_dump(by_alias=bool(by_alias)) for name, column in columns.items()}


class TableSchema(BaseModel):
    """Schema for a database table.

    ``columns`` is a read-only mapping; neither it nor the model's fields
    can be changed after validation.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    columns: Annotated[
        Mapping[str, ColumnSchema], AfterValidator(_read_only)
    ] = Field(default_factory=dict, validate_default=True)

    @field_serializer("columns")
    def _serialize_columns(
        self, columns: Mapping[str, ColumnSchema], info: SerializationInfo
    ) -> dict[str, dict[str, str | None]]:
        return _dump_columns(columns, info.by_alias)

    @model_validator(mode="after")
    def _check_column_keys(self) -> "TableSchema":
        for column_name, column in self.columns.items():
            if column.field != column_name:
                raise ValueError(
                    f"Column key '{column_name}' in table '{self.name}' "
                    f"does not match its Field '{column.field}'"
                )
        return self


class Snapshot(BaseModel):
    """Captured schema of one database instance.

    ``label`` and ``captured_at`` are informational; only ``tables`` takes
    part in comparison. ``tables`` and each table's ``columns`` are
    read-only mappings.

    Serialized, each table is a bare map of column name to its
    ``SHOW COLUMNS`` row. That shape validates back, and a row may omit
    ``Field`` since its key supplies it.

    Example:
        >>> snap = Snapshot(label="staging", tables={"users": {"id": {"Type": "int(11)"}}})
        >>> snap.table_names
        ['users']
        >>> snap.tables["users"].columns["id"].field
        'id'
    """

    model_config = ConfigDict(frozen=True)

    label: str
    captured_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    tables: Annotated[
        Mapping[str, TableSchema], AfterValidator(_read_only)
    ] = Field(default_factory=dict, validate_default=True)

    @field_validator("tables", mode="before")
    @classmethod
    def _expand_tables(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        return {name: _as_table(name, table) for name, table in value.items()}

    @field_serializer("tables")
    def _serialize_tables(
        self, tables: Mapping[str, TableSchema], info: SerializationInfo
    ) -> dict[str, dict[str, dict[str, str | None]]]:
        return {name: _dump_columns(table.columns, info.by_alias) for name, table in tables.items()}

    @model_validator(mode="after")
    def _check_table_keys(self) -> "Snapshot":
        for table_name, table in self.tables.items():
            if table.name != table_name:
                raise ValueError(
                    f"Table key '{table_name}' does not match its name '{table.name}'"
                )
        return self

    @property
    def table_names(self) -> list[str]:
        """Table names in capture order."""
        return list(self.tables.keys())


# ============================================================================
# Comparison Result Models
# ============================================================================


class DiffReport(BaseModel):
    """Result of comparing two snapshots.

    ``tables`` maps a table name to its discrepancy messages. A table that
    is identical on both sides never appears.

    Example:
        >>> report = DiffReport(label_a="a", label_b="b")
        >>> report.identical
        True
        >>> report.format_report()
        'Schemas identical'
    """

    label_a: str
    label_b: str
    tables: dict[str, list[str]] = Field(default_factory=dict)

    def __contains__(self, table_name: object) -> bool:
        return table_name in self.tables

    def __getitem__(self, table_name: str) -> list[str]:
        return self.tables[table_name]

    @property
    def identical(self) -> bool:
        """True when no table has a discrepancy."""
        return not self.tables

    @property
    def discrepancy_count(self) -> int:
        """Total number of discrepancy messages across all tables."""
        return sum(len(messages) for messages in self.tables.values())

    def format_report(self) -> str:
        """Format the report as human-readable text."""
        if self.identical:
            return "Schemas identical"

        lines = [
            f"Schema differences between {self.label_a} and {self.label_b} "
            f"({self.discrepancy_count}):"
        ]
        for table_name, messages in self.tables.items():
            lines.append(f"\n  {table_name}:")
            for message in messages:
                lines.append(f"    - {message}")

        return "\n".join(lines)


class ComparisonResult(BaseModel):
    """Result of compare_profiles().

    Example:
        >>> result = ComparisonResult(success=False, error="boom")
        >>> result.report is None
        True
    """

    success: bool
    report: DiffReport | None = None
    error: str | None = None
