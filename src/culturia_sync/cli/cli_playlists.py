from __future__ import annotations

import argparse

from rich.table import Table

from culturia_sync.cli.common import EXIT_OK, add_output_flags, make_console
from culturia_sync.env import paths
from culturia_sync.sync.resolver import PlaylistRecordStore


def build_playlists_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "playlists", help="List the playlists this engine manages"
    )
    p.add_argument("--country", help="Only show one country")
    add_output_flags(p)


def handle_playlists(args: argparse.Namespace) -> int:
    console = make_console(quiet=args.quiet)
    records = PlaylistRecordStore(paths.playlist_records_file()).all()

    if args.country:
        wanted = args.country.strip().upper()
        records = [r for r in records if r.key.country_code == wanted]

    if not records:
        console.print("(no playlists)")
        return EXIT_OK

    table = Table("key", "title", "url", "updated")
    for r in records:
        table.add_row(str(r.key), r.playlist_name, r.playlist_url, r.updated_at)
    console.print(table)
    return EXIT_OK
