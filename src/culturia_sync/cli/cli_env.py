from __future__ import annotations

import argparse

from culturia_sync.cli.common import EXIT_OK, make_console
from culturia_sync.env import get_env


def build_env_parser(subparsers: argparse._SubParsersAction) -> None:
    env = subparsers.add_parser("env", help="Environment utilities")
    sub = env.add_subparsers(dest="env_cmd", required=True)

    sub.add_parser("dump", help="Show resolved runtime environment")


def handle_env(args: argparse.Namespace) -> int:
    if args.env_cmd == "dump":
        return handle_env_dump()

    raise RuntimeError(f"Unknown env action: {args.env_cmd}")


def handle_env_dump() -> int:
    console = make_console()
    data = get_env().as_dict()

    console.print("\n[bold]Runtime Environment[/bold]")
    console.print("-" * 50)

    for section, values in data.items():
        console.print(f"\n[bold cyan]{section}[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key:<20} = {value}", markup=False)

    console.print()
    return EXIT_OK
