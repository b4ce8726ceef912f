from __future__ import annotations

import argparse

from culturia_sync.cli.common import (
    EXIT_USAGE,
    add_output_flags,
    make_console,
    print_error,
    print_sync_result,
    sync_result_exit_code,
)
from culturia_sync.config import CATEGORY_LABELS
from culturia_sync.logger import get_logger
from culturia_sync.sync.request import SyncRequest, SyncValidationError

# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_sync_parser(subparsers: argparse._SubParsersAction) -> None:
    sync = subparsers.add_parser(
        "sync", help="Sync approved submissions into YouTube playlists"
    )
    sp = sync.add_subparsers(dest="scope", required=True)

    all_p = sp.add_parser("all", help="Every (country, category) with approved videos")
    add_output_flags(all_p)

    country_p = sp.add_parser("country", help="Every category for one country")
    country_p.add_argument("country", help="ISO country code (e.g. FR or FRA)")
    add_output_flags(country_p)

    category_p = sp.add_parser("category", help="A single (country, category) playlist")
    category_p.add_argument("country", help="ISO country code (e.g. FR or FRA)")
    category_p.add_argument("category", help=f"One of: {', '.join(CATEGORY_LABELS)}")
    add_output_flags(category_p)


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_sync(args: argparse.Namespace) -> int:
    console = make_console(quiet=args.quiet)
    log = get_logger("culturia_sync.cli.sync")

    try:
        request = SyncRequest.build(
            args.scope,
            getattr(args, "country", None),
            getattr(args, "category", None),
        )
    except SyncValidationError as e:
        print_error(console, str(e))
        return EXIT_USAGE

    from culturia_sync.services import build_services

    services = build_services()

    log.info(f"Sync scope: {request.describe()}")
    result = services.orchestrator.run(request)

    try:
        services.sync_log.append(request, result)
    except OSError as e:
        log.warning(f"Could not write sync log entry: {e}")

    print_sync_result(console, result)

    if services.client.quota_exhausted:
        log.warning("YouTube API quota exhausted (playlists may be incomplete)")

    code = sync_result_exit_code(result)
    if code == 0:
        log.info("Done: OK")
    elif result.aborted:
        log.error("Done: OAuth invalid (reconnect required)")
    else:
        log.error("Done: completed with errors")
    return code
