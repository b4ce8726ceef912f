from __future__ import annotations

import argparse

from rich.text import Text

from culturia_sync.auth import AuthError, AuthHealthStatus
from culturia_sync.cli.common import (
    EXIT_AUTH_INVALID,
    EXIT_ERRORS,
    EXIT_OK,
    EXIT_USAGE,
    add_output_flags,
    make_console,
    print_error,
)
from culturia_sync.env import ConfigError
from culturia_sync.logger import get_logger

# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_auth_parser(subparsers: argparse._SubParsersAction) -> None:
    auth = subparsers.add_parser(
        "auth",
        help="Connect, inspect or disconnect the YouTube account",
    )
    sp = auth.add_subparsers(dest="auth_cmd", required=True)

    url_p = sp.add_parser("url", help="Print the Google consent URL")
    add_output_flags(url_p)

    connect_p = sp.add_parser(
        "connect", help="Exchange an authorization code and store the credential"
    )
    connect_p.add_argument("code", help="The ?code= value from the OAuth callback")
    add_output_flags(connect_p)

    status_p = sp.add_parser("status", help="Show the stored connection")
    add_output_flags(status_p)

    disconnect_p = sp.add_parser("disconnect", help="Delete the stored credential")
    add_output_flags(disconnect_p)

    check_p = sp.add_parser("check", help="Validate OAuth with a live API call")
    add_output_flags(check_p)


# ------------------------------------------------------------
# Subcommands
# ------------------------------------------------------------


def _url(services, console) -> int:
    console.print(services.oauth.authorization_url(), soft_wrap=True)
    return EXIT_OK


def _connect(services, console, code: str) -> int:
    credential = services.oauth.exchange_code(code)
    services.tokens.connect(credential)
    msg = Text("Connected", style="green")
    msg.append(f" as {credential.subject_id}", style="dim")
    console.print(msg)
    return EXIT_OK


def _status(services, console) -> int:
    status = services.tokens.status()
    if not status.connected:
        console.print(Text("Not connected", style="yellow"))
        return EXIT_OK

    msg = Text("Connected", style="green")
    msg.append(f" as {status.account_identifier}")
    if status.token_expired:
        msg.append(" (access token expired; refreshes on next use)", style="dim")
    console.print(msg)
    return EXIT_OK


def _disconnect(services, console) -> int:
    if services.tokens.disconnect():
        console.print(Text("Disconnected", style="green"))
    else:
        console.print(Text("Nothing to disconnect", style="dim"))
    return EXIT_OK


def _check(services, console, verbose: bool) -> int:
    result = services.oauth.health_check(services.client)

    if result.status == AuthHealthStatus.OK:
        msg = Text("OAuth OK", style="green")
        if verbose:
            msg.append(" (token valid and usable)", style="dim")
        console.print(msg)
        return EXIT_OK

    if result.status == AuthHealthStatus.OK_API_QUOTA:
        msg = Text("OAuth OK", style="green")
        msg.append(" (API quota exhausted)", style="yellow")
        console.print(msg)
        return EXIT_OK

    if result.status == AuthHealthStatus.AUTH_INVALID:
        console.print(Text("OAuth INVALID - reauthentication required", style="red"))
        return EXIT_AUTH_INVALID

    console.print(Text(result.message, style="red"))
    return EXIT_ERRORS


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_auth(args: argparse.Namespace) -> int:
    console = make_console(quiet=args.quiet)
    logger = get_logger("culturia_sync.cli.auth")

    from culturia_sync.services import build_services

    services = build_services()

    try:
        if args.auth_cmd == "url":
            return _url(services, console)
        if args.auth_cmd == "connect":
            return _connect(services, console, args.code)
        if args.auth_cmd == "status":
            return _status(services, console)
        if args.auth_cmd == "disconnect":
            return _disconnect(services, console)
        if args.auth_cmd == "check":
            return _check(services, console, args.verbose)
    except ConfigError as e:
        logger.error(str(e))
        print_error(console, str(e))
        return EXIT_USAGE
    except AuthError as e:
        logger.error(f"auth.{args.auth_cmd}.failed: {e}")
        print_error(console, f"Authentication failed: {e}")
        return EXIT_AUTH_INVALID

    raise RuntimeError(f"Unknown auth command: {args.auth_cmd}")
