"""bootstrap.py

Process bootstrap for culturia-sync.

Rules:
1) Only bootstrap mutates os.environ for shared run context.
2) Call bootstrap_base_env() once at the entrypoint (CLI main or ASGI app).
3) Call bootstrap_run_context() after argparse parsing, before init_logging().

Everything else treats environment variables as the source of truth.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

from culturia_sync.env import PROJECT_ROOT, _load_dotenv, reset_env_caches

_BOOTSTRAPPED = False


def bootstrap_base_env(dotenv_path: Path | None = None) -> None:
    """Load config/.env (if present) without overriding the real environment."""
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return

    _load_dotenv(dotenv_path or PROJECT_ROOT / "config" / ".env")

    os.environ.setdefault(
        "CULTURIA_RUN_ID",
        datetime.now().strftime("%Y-%m-%d_%H-%M-%S"),
    )

    reset_env_caches()
    _BOOTSTRAPPED = True


def bootstrap_run_context(
    *,
    command: str,
    verbose: bool | None = None,
    quiet: bool | None = None,
) -> None:
    """Establish run-scoped context used by logging."""

    os.environ["CULTURIA_COMMAND"] = command

    if verbose is not None:
        os.environ["CULTURIA_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["CULTURIA_QUIET"] = "1" if quiet else "0"

    # Context changes must invalidate cached env views.
    reset_env_caches()
