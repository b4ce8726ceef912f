from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from culturia_sync import config
from culturia_sync.env import paths

# ------------------------------------------------------------
# Minimal dotenv loader (read-only helper, bootstrap owns usage)
# ------------------------------------------------------------


def _load_dotenv(path: Path) -> None:
    """
    Minimal dotenv loader.
    - Silent
    - Never overrides existing os.environ
    """
    if not path.exists():
        return

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        k, v = line.split("=", 1)
        k = k.strip()
        v = v.strip()

        if k.startswith("export "):
            k = k[len("export ") :].strip()

        # strip inline comments
        if " #" in v:
            v = v.split(" #", 1)[0].rstrip()

        # strip quotes
        if len(v) >= 2 and v[0] == v[-1] and v[0] in ("'", '"'):
            v = v[1:-1]

        if k and k not in os.environ:
            os.environ[k] = v


# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _require(name: str) -> str:
    v = os.environ.get(name)
    if not v:
        raise ConfigError(f"Missing required environment variable: {name}")
    return v


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except Exception:
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except Exception:
        return default


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    return LoggingEnvironment(
        log_level=os.environ.get("LOG_LEVEL", config.DEFAULT_LOG_LEVEL),
        log_retention=_as_int(
            os.environ.get("LOG_RETENTION", str(config.DEFAULT_LOG_RETENTION)),
            config.DEFAULT_LOG_RETENTION,
        ),
        verbose=_as_bool(os.environ.get("CULTURIA_VERBOSE", "0")),
        quiet=_as_bool(os.environ.get("CULTURIA_QUIET", "0")),
    )


# ------------------------------------------------------------
# Full runtime environment
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        self._logging = get_logging_env()

        # ---- OAUTH CLIENT ----
        # Client id/secret are only needed for OAuth operations, so they are
        # resolved lazily through the properties below.
        self.redirect_uri = os.environ.get(
            "YOUTUBE_REDIRECT_URI", config.DEFAULT_REDIRECT_URI
        )
        self.admin_url = os.environ.get("CULTURIA_ADMIN_URL", config.DEFAULT_ADMIN_URL)

        # ---- REMOTE CALLS ----
        self.request_timeout = _as_int(
            os.environ.get("YT_REQUEST_TIMEOUT", str(config.DEFAULT_REQUEST_TIMEOUT_SEC)),
            config.DEFAULT_REQUEST_TIMEOUT_SEC,
        )
        self.max_retries = max(
            0,
            _as_int(
                os.environ.get("YT_MAX_RETRIES", str(config.DEFAULT_MAX_RETRIES)),
                config.DEFAULT_MAX_RETRIES,
            ),
        )
        self.backoff_base = _as_float(
            os.environ.get("YT_BACKOFF_BASE_SEC", str(config.DEFAULT_BACKOFF_BASE_SEC)),
            config.DEFAULT_BACKOFF_BASE_SEC,
        )
        self.mutation_sleep = _as_float(
            os.environ.get(
                "YT_MUTATION_SLEEP_SEC", str(config.DEFAULT_MUTATION_SLEEP_SEC)
            ),
            config.DEFAULT_MUTATION_SLEEP_SEC,
        )
        self.token_refresh_skew = _as_int(
            os.environ.get(
                "TOKEN_REFRESH_SKEW_SEC", str(config.DEFAULT_TOKEN_REFRESH_SKEW_SEC)
            ),
            config.DEFAULT_TOKEN_REFRESH_SKEW_SEC,
        )

        # ---- PLAYLISTS ----
        self.playlist_privacy = os.environ.get(
            "PLAYLIST_PRIVACY", config.DEFAULT_PLAYLIST_PRIVACY
        )

        # ---- RUN CONTEXT ----
        self.command = os.environ.get("CULTURIA_COMMAND", "bootstrap")

    @property
    def client_id(self) -> str:
        return _require("YOUTUBE_CLIENT_ID")

    @property
    def client_secret(self) -> str:
        return _require("YOUTUBE_CLIENT_SECRET")

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "OAuth": {
                "client_id": "set" if os.environ.get("YOUTUBE_CLIENT_ID") else "missing",
                "redirect_uri": self.redirect_uri,
                "admin_url": self.admin_url,
            },
            "Remote": {
                "request_timeout": self.request_timeout,
                "max_retries": self.max_retries,
                "backoff_base": self.backoff_base,
                "mutation_sleep": self.mutation_sleep,
                "token_refresh_skew": self.token_refresh_skew,
            },
            "Content": {
                "submissions_file": str(paths.submissions_file()),
                "data_dir": str(paths.data_dir()),
                "playlist_privacy": self.playlist_privacy,
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
