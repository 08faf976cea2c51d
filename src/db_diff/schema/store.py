"""JSON persistence for schema snapshots.

Snapshots are written with the ``SHOW COLUMNS`` attribute names so a file
reads the same as the introspection output it came from, and can be
compared later from another process.

Usage:
    from db_diff.schema.store import load_snapshot, save_snapshot

    save_snapshot(snapshot, "snapshots/staging.json")
    staging = load_snapshot("snapshots/staging.json")
"""

from pathlib import Path

from pydantic import ValidationError

from db_diff.schema.models import Snapshot


def dump_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot to indented JSON text."""
    return snapshot.model_dump_json(by_alias=True, indent=2)


def save_snapshot(snapshot: Snapshot, path: str | Path) -> Path:
    """Write a snapshot to *path*, creating parent directories.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_snapshot(snapshot) + "\n")
    return path


def load_snapshot(path: str | Path) -> Snapshot:
    """Read a snapshot previously written by ``save_snapshot``.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a valid snapshot.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    try:
        return Snapshot.model_validate_json(path.read_text())
    except ValidationError as e:
        raise ValueError(f"Invalid snapshot file {path.name}: {e}") from e
