from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from culturia_sync.env import get_logging_env

# stderr keeps stdout free for command output (tables, JSON)
CONSOLE = Console(file=sys.stderr, soft_wrap=True)


class QuietFilter(logging.Filter):
    """Drop console records while quiet mode is on."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not get_logging_env().quiet


def build_console_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        console=CONSOLE,
        level=level,
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
    )

    # RichHandler renders the level column itself.
    handler.setFormatter(logging.Formatter("%(message)s"))

    handler.addFilter(QuietFilter())
    return handler
