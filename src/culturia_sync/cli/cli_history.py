from __future__ import annotations

import argparse

from rich.table import Table
from rich.text import Text

from culturia_sync.cli.common import EXIT_OK, add_output_flags, make_console
from culturia_sync.env import paths
from culturia_sync.synclog import SyncLog

_STATUS_STYLE = {"success": "green", "partial": "yellow", "failed": "red"}


def build_history_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("history", help="Show recent sync runs")
    p.add_argument("-n", "--limit", type=int, default=10, help="Runs to show")
    add_output_flags(p)


def _scope(entry: dict) -> str:
    parts = [entry.get("sync_type") or "?"]
    if entry.get("country_code"):
        parts.append(entry["country_code"])
    if entry.get("category"):
        parts.append(entry["category"])
    return " ".join(parts)


def handle_history(args: argparse.Namespace) -> int:
    console = make_console(quiet=args.quiet)
    entries = SyncLog(paths.sync_log_file()).tail(args.limit)

    if not entries:
        console.print("No sync runs recorded")
        return EXIT_OK

    table = Table("synced_at", "scope", "status", "created", "updated", "videos", "error")
    for e in reversed(entries):
        status = str(e.get("status", "unknown"))
        table.add_row(
            str(e.get("synced_at", "")),
            _scope(e),
            Text(status, style=_STATUS_STYLE.get(status, "")),
            str(e.get("playlists_created", 0)),
            str(e.get("playlists_updated", 0)),
            str(e.get("videos_synced", 0)),
            str(e.get("error_message") or ""),
        )
    console.print(table)
    return EXIT_OK
