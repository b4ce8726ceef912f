"""
api_manager.py

Retry engine and HTTP -> domain error translation for YouTube Data API calls.

Responsibilities:
- Classify googleapiclient / transport failures into RemoteUnavailable
  (retryable) and RemoteRejected (not retried)
- One bounded retry with exponential backoff for transient failures
- Quota tripwire so an exhausted account stops spending requests
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, Optional, TypeVar

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from culturia_sync import config
from culturia_sync.auth.errors import AuthRefreshFailed
from culturia_sync.logger import get_logger

logger = get_logger(__name__)
T = TypeVar("T")

# ============================================================
# Exceptions
# ============================================================


class RemoteError(Exception):
    """Base class for failures talking to the video platform."""


class RemoteUnavailable(RemoteError):
    """Network failure, timeout, 429 or 5xx. A later run may succeed."""


class RemoteRejected(RemoteError):
    """4xx other than auth. Not retried."""

    def __init__(self, message: str, *, status: Optional[int] = None, reason: str = ""):
        super().__init__(message)
        self.status = status
        self.reason = reason

    @property
    def is_duplicate(self) -> bool:
        return self.status == 409 or self.reason in config.DUPLICATE_REASONS

    @property
    def is_not_found(self) -> bool:
        return self.status == 404 or self.reason.endswith("NotFound")

    @property
    def is_playlist_not_found(self) -> bool:
        return self.reason == "playlistNotFound"

    @property
    def is_quota(self) -> bool:
        return self.reason in config.QUOTA_REASONS


# ============================================================
# Error detection helpers
# ============================================================


def _error_payload(e: HttpError) -> Dict[str, Any]:
    try:
        raw = e.content
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="ignore")
        data = json.loads(raw or "{}")
        return data if isinstance(data, dict) else {}
    except (ValueError, AttributeError):
        return {}


def _error_reason(payload: Dict[str, Any]) -> str:
    """
    YouTube reports the machine-readable cause here:
    error.errors[].reason (e.g. quotaExceeded, playlistNotFound)
    """
    err = payload.get("error")
    if not isinstance(err, dict):
        return ""
    for item in err.get("errors") or []:
        if isinstance(item, dict) and item.get("reason"):
            return str(item["reason"])
    return ""


def _error_message(e: HttpError, payload: Dict[str, Any]) -> str:
    err = payload.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return str(getattr(e, "reason", "") or e)


def classify_http_error(e: HttpError, operation: str) -> Exception:
    """Translate an HttpError into the domain error for `operation`."""
    status = getattr(getattr(e, "resp", None), "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None

    payload = _error_payload(e)
    reason = _error_reason(payload)
    message = _error_message(e, payload)

    if status == 401:
        return AuthRefreshFailed(f"{operation}: access token rejected ({message})")

    if reason in config.RATE_LIMIT_REASONS:
        return RemoteUnavailable(f"{operation}: rate limited ({message})")

    if status in config.TRANSIENT_STATUS_CODES:
        return RemoteUnavailable(f"{operation}: HTTP {status} ({message})")

    detail = f"HTTP {status} {reason}" if reason else f"HTTP {status}"
    return RemoteRejected(
        f"{operation}: {detail} ({message})",
        status=status,
        reason=reason,
    )


def _is_transport_failure(e: Exception) -> bool:
    # socket.timeout, TimeoutError and ConnectionError are all OSError
    return isinstance(e, (OSError, httplib2.HttpLib2Error, TransportError))


# ============================================================
# Retry engine
# ============================================================


class QuotaTripwire:
    """Remembers that the account's daily quota is gone."""

    def __init__(self) -> None:
        self.exhausted = False

    def check(self) -> None:
        if self.exhausted:
            raise RemoteRejected(
                "YouTube API quota exhausted; try again after the daily reset",
                status=403,
                reason="quotaExceeded",
            )

    def mark(self) -> None:
        if not self.exhausted:
            logger.warning("YouTube API quota exhausted")
        self.exhausted = True

    def reset(self) -> None:
        if self.exhausted:
            logger.info("Clearing YouTube API quota tripwire")
        self.exhausted = False


def execute_with_retry(
    operation: Callable[[], T],
    name: str,
    *,
    max_retries: int = config.DEFAULT_MAX_RETRIES,
    backoff_base: float = config.DEFAULT_BACKOFF_BASE_SEC,
    tripwire: Optional[QuotaTripwire] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run `operation`, retrying RemoteUnavailable up to `max_retries` times.

    RemoteRejected and auth failures are raised immediately.
    """
    last_exception: Optional[RemoteUnavailable] = None

    for attempt in range(max_retries + 1):
        if tripwire is not None:
            tripwire.check()

        try:
            return operation()

        except HttpError as e:
            err = classify_http_error(e, name)
            if isinstance(err, RemoteRejected) and err.is_quota and tripwire is not None:
                tripwire.mark()
            if not isinstance(err, RemoteUnavailable):
                raise err from e
            err.__cause__ = e
            last_exception = err

        except RefreshError as e:
            raise AuthRefreshFailed(f"{name}: {e}") from e

        except Exception as e:
            if not _is_transport_failure(e):
                raise
            err = RemoteUnavailable(f"{name}: {type(e).__name__}: {e}")
            err.__cause__ = e
            last_exception = err

        if attempt == max_retries:
            break

        sleep_time = backoff_base * (2**attempt)
        logger.warning(
            f"{name} failed (attempt {attempt + 1}/{max_retries + 1}), "
            f"retrying in {sleep_time}s: {last_exception}"
        )
        sleep(sleep_time)

    if last_exception is None:
        raise RemoteUnavailable(f"{name}: not attempted (max_retries={max_retries})")
    raise last_exception
