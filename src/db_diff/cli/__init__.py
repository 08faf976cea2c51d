"""CLI for capturing and comparing database schema snapshots.

Usage:
    db-diff profiles
    db-diff export staging --output snapshots/staging.json
    db-diff compare staging production
    db-diff compare snapshots/staging.json production

Commands:
    profiles  - List available profiles
    export    - Capture a profile's schema as a JSON snapshot
    compare   - Compare two profiles or snapshot files
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from db_diff.config.loader import load_db_config
from db_diff.factory import ProfileNotFoundError, export_profile
from db_diff.schema.comparator import compare
from db_diff.schema.models import DiffReport, Snapshot
from db_diff.schema.store import dump_snapshot, load_snapshot, save_snapshot

console = Console()


# ============================================================================
# Source resolution (CLI-internal helper)
# ============================================================================


def _load_source(source: str, config_path: str | None) -> Snapshot:
    """Resolve a compare argument into a snapshot.

    A source ending in ``.json`` is read as a snapshot file; anything else
    is treated as a profile name and captured live.

    Raises:
        FileNotFoundError: If a snapshot file or db.toml is missing.
        ValueError: If a snapshot file or db.toml is invalid.
        ProfileNotFoundError: If the profile is not configured.
        ConnectionError: If the profile's database cannot be reached.
    """
    if source.endswith(".json"):
        return load_snapshot(source)
    return export_profile(source, config_path=config_path)


def _print_report(report: DiffReport) -> None:
    """Render a diff report as one table row per discrepancy."""
    diff_table = Table(
        title=f"Schema Differences: {escape(report.label_a)} vs {escape(report.label_b)}",
        show_header=True,
        header_style="bold",
    )
    diff_table.add_column("Table", style="dim")
    diff_table.add_column("Discrepancy")

    for table_name, messages in report.tables.items():
        for i, message in enumerate(messages):
            diff_table.add_row(escape(table_name) if i == 0 else "", escape(message))

    console.print(diff_table)


# ============================================================================
# Commands
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from db.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if db.toml not found or invalid.
    """
    try:
        config = load_db_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    table = Table(
        title="Database Profiles", show_header=True, header_style="bold"
    )
    table.add_column("Profile")
    table.add_column("Host")
    table.add_column("Database")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        table.add_row(
            f"[bold cyan]{escape(name)}[/bold cyan]",
            escape(f"{profile.host}:{profile.port}"),
            escape(profile.name),
            escape(profile.description),
        )

    console.print(table)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Capture a profile's schema and write it as JSON.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        snapshot = export_profile(
            args.profile, label=args.label, config_path=args.config
        )
    except (FileNotFoundError, ValueError, KeyError, ProfileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    except ConnectionError as e:
        console.print(
            f"[bold red]x[/bold red] Could not capture a snapshot for "
            f"database [bold]{escape(args.profile)}[/bold]: {escape(str(e))}"
        )
        return 1

    if args.output:
        path = save_snapshot(snapshot, args.output)
        console.print(
            f"[bold green]v[/bold green] Saved [bold cyan]{escape(snapshot.label)}[/bold cyan] "
            f"({len(snapshot.tables)} tables) to {escape(str(path))}"
        )
    else:
        print(dump_snapshot(snapshot))

    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare two schema sources.

    Both sources are captured before any comparison runs.

    Returns:
        0 if the schemas are identical, 1 on differences or failure.
    """
    snapshots: list[Snapshot] = []
    for source in (args.source_a, args.source_b):
        try:
            snapshots.append(_load_source(source, args.config))
        except (FileNotFoundError, ValueError, KeyError, ProfileNotFoundError) as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            return 1
        except ConnectionError as e:
            console.print(
                f"[bold red]x[/bold red] Could not capture a snapshot for "
                f"database [bold]{escape(source)}[/bold]: {escape(str(e))}"
            )
            return 1

    report = compare(snapshots[0], snapshots[1])

    console.print()
    if report.identical:
        console.print(
            f"[bold green]v[/bold green] [bold]{escape(report.label_a)}[/bold] and "
            f"[bold]{escape(report.label_b)}[/bold] have identical schemas"
        )
        return 0

    _print_report(report)
    console.print(
        f"\n[bold red]x[/bold red] {report.discrepancy_count} discrepancies "
        f"in {len(report.tables)} tables"
    )
    return 1


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="db-diff",
        description="Capture and compare relational database schemas",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to db.toml (default: $DB_DIFF_CONFIG or ./db.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    # export command
    p_export = subparsers.add_parser(
        "export",
        help="Capture a profile's schema as a JSON snapshot",
    )
    p_export.add_argument("profile", help="Profile name from db.toml")
    p_export.add_argument(
        "--label",
        default=None,
        help="Snapshot label (default: profile name)",
    )
    p_export.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="File to write (default: stdout)",
    )
    p_export.set_defaults(func=cmd_export)

    # compare command
    p_compare = subparsers.add_parser(
        "compare",
        help="Compare two profiles or snapshot files",
    )
    p_compare.add_argument("source_a", help="Profile name or snapshot .json file")
    p_compare.add_argument("source_b", help="Profile name or snapshot .json file")
    p_compare.set_defaults(func=cmd_compare)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors or differences).
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
