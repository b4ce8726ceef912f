from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table
from rich.text import Text

from culturia_sync.sync.models import SyncResult

# ----------------------------
# Exit codes
# ----------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_AUTH_INVALID = 12
EXIT_ERRORS = 20


# ----------------------------
# Parser helpers
# ----------------------------


def add_output_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--verbose", action="store_true", help="Verbose console output")
    p.add_argument("--quiet", action="store_true", help="Suppress console output")


# ----------------------------
# Output helpers
# ----------------------------


def make_console(quiet: bool = False) -> Console:
    return Console(quiet=quiet)


def print_error(console: Console, message: str) -> None:
    console.print(Text(message, style="red"))


def sync_result_exit_code(result: SyncResult) -> int:
    if result.success:
        return EXIT_OK
    if result.aborted:
        return EXIT_AUTH_INVALID
    return EXIT_ERRORS


def print_sync_result(console: Console, result: SyncResult) -> None:
    style = {"success": "green", "partial": "yellow", "failed": "red"}[result.status]

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Status", Text(result.status, style=style))
    table.add_row("Playlists created", str(result.playlists_created))
    table.add_row("Playlists updated", str(result.playlists_updated))
    table.add_row("Videos added", str(result.videos_added))
    table.add_row("Finished", result.timestamp)
    console.print(table)

    for err in result.errors:
        console.print(Text(f"  - {err}", style="red"))
