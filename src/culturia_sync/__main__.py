from __future__ import annotations

import argparse
import sys

from culturia_sync.bootstrap import bootstrap_base_env, bootstrap_run_context


def _dispatch_help(argv: list[str]) -> int:
    # Support:
    #   culturia-sync help
    #   culturia-sync help sync category
    path = argv[1:] if argv and argv[0] == "help" else argv

    try:
        build_parser().parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="culturia-sync")

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from culturia_sync.cli.cli_auth import build_auth_parser
    from culturia_sync.cli.cli_env import build_env_parser
    from culturia_sync.cli.cli_history import build_history_parser
    from culturia_sync.cli.cli_playlists import build_playlists_parser
    from culturia_sync.cli.cli_sync import build_sync_parser

    build_sync_parser(sub)
    build_auth_parser(sub)
    build_playlists_parser(sub)
    build_history_parser(sub)
    build_env_parser(sub)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    bootstrap_base_env()

    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "_help", False):
        return _dispatch_help(argv)

    # Stamp run context before logging picks its file
    bootstrap_run_context(
        command=args.command,
        verbose=bool(getattr(args, "verbose", False)),
        quiet=bool(getattr(args, "quiet", False)),
    )

    from culturia_sync.logger import get_logger, init_logging

    init_logging()

    log = get_logger("culturia_sync")
    log.info("culturia-sync starting")
    log.info(f"Command: {args.command}")

    if args.command == "sync":
        from culturia_sync.cli.cli_sync import handle_sync

        return handle_sync(args)

    if args.command == "auth":
        from culturia_sync.cli.cli_auth import handle_auth

        return handle_auth(args)

    if args.command == "playlists":
        from culturia_sync.cli.cli_playlists import handle_playlists

        return handle_playlists(args)

    if args.command == "history":
        from culturia_sync.cli.cli_history import handle_history

        return handle_history(args)

    if args.command == "env":
        from culturia_sync.cli.cli_env import handle_env

        return handle_env(args)

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
