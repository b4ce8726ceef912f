from __future__ import annotations

import os
from pathlib import Path

from culturia_sync import config

# ---------------------------------------------------------------------
# Project root
# ---------------------------------------------------------------------

# This file lives in src/culturia_sync/env/, so project root is three levels up
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


# ---------------------------------------------------------------------
# Base directories (override-friendly)
# ---------------------------------------------------------------------


def _resolve_dir(env_var: str, default: Path) -> Path:
    """
    Resolve a directory path from an environment variable or default.
    Ensures the directory exists.
    """
    raw = os.environ.get(env_var)
    path = Path(raw).expanduser().resolve() if raw else default
    path.mkdir(parents=True, exist_ok=True)
    return path


def data_dir() -> Path:
    """Credential, playlist records and sync log live here."""
    return _resolve_dir("CULTURIA_DATA_DIR", PROJECT_ROOT / "data")


def logs_dir() -> Path:
    return _resolve_dir("CULTURIA_LOGS_DIR", PROJECT_ROOT / "logs")


# ---------------------------------------------------------------------
# Persisted state files
# ---------------------------------------------------------------------


def credential_file() -> Path:
    return data_dir() / config.CREDENTIAL_BASENAME


def playlist_records_file() -> Path:
    return data_dir() / config.PLAYLIST_RECORDS_BASENAME


def sync_log_file() -> Path:
    return data_dir() / config.SYNC_LOG_BASENAME


def submissions_file() -> Path:
    """CULTURIA_SUBMISSIONS_FILE, or the export dropped into the data dir."""
    raw = os.environ.get("CULTURIA_SUBMISSIONS_FILE")
    if raw:
        return Path(raw).expanduser().resolve()
    return data_dir() / config.SUBMISSIONS_BASENAME


# ---------------------------------------------------------------------
# Log layout helpers (used by logger)
# ---------------------------------------------------------------------


def module_logs_dir(command: str) -> Path:
    """
    Base log directory for a CLI command (e.g. sync, auth, serve).
    """
    path = logs_dir() / command
    path.mkdir(parents=True, exist_ok=True)
    return path
