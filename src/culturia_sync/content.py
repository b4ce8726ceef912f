"""
content.py

Read side of the submissions datastore.

The sync engine only consumes approved submissions through the narrow
ContentQuery protocol. SubmissionsFile is the bundled implementation: it
reads a JSON export of the submissions table, either a list of rows or an
object with a "submissions" list.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import parse_qs, urlparse

from culturia_sync.logger import get_logger
from culturia_sync.sync.models import Category, SubmissionRef, normalize_country

logger = get_logger(__name__)

APPROVED = "approved"

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")


class ContentQueryError(RuntimeError):
    """The submissions export could not be read."""


class ContentQuery(Protocol):
    def approved_submissions(
        self,
        country: Optional[str] = None,
        category: Optional[Category] = None,
    ) -> List[SubmissionRef]: ...


def extract_video_id(url: str) -> Optional[str]:
    """
    Video id from the common YouTube URL shapes:
    watch?v=, youtu.be/, /embed/, /shorts/, /live/
    """
    if not url:
        return None

    parsed = urlparse(url.strip())
    host = (parsed.hostname or "").lower()

    candidate: Optional[str] = None
    if host.endswith("youtu.be"):
        candidate = parsed.path.lstrip("/").split("/", 1)[0]
    elif host.endswith("youtube.com") or host.endswith("youtube-nocookie.com"):
        if parsed.path == "/watch":
            candidate = (parse_qs(parsed.query).get("v") or [None])[0]
        else:
            parts = [p for p in parsed.path.split("/") if p]
            if len(parts) >= 2 and parts[0] in ("embed", "shorts", "live", "v"):
                candidate = parts[1]

    if candidate and _VIDEO_ID_RE.match(candidate):
        return candidate
    return None


def _as_enabled(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ("0", "false", "no", "off")
    return bool(value)


def submission_from_row(row: Dict[str, Any]) -> Optional[SubmissionRef]:
    """
    Projects one approved, sync-enabled row. Returns None for rows the
    sync must not see; raises ValueError for approved rows it cannot use.
    """
    if str(row.get("status", "")).strip().lower() != APPROVED:
        return None
    if not _as_enabled(row.get("youtube_sync_enabled")):
        return None

    video_id = row.get("youtube_video_id") or extract_video_id(str(row.get("youtube_url") or ""))
    if not video_id:
        raise ValueError("no YouTube video id")

    return SubmissionRef(
        id=str(row.get("id", "")),
        remote_video_id=str(video_id),
        country_code=normalize_country(row.get("country_code")),
        category=Category.parse(row.get("category")),
    )


class SubmissionsFile:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _rows(self) -> List[Dict[str, Any]]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ContentQueryError(f"Submissions file not found: {self.path}") from e
        except (OSError, ValueError) as e:
            raise ContentQueryError(f"Failed to read submissions file {self.path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("submissions")
        if not isinstance(data, list):
            raise ContentQueryError(
                f"Submissions file {self.path} must hold a list of submissions"
            )
        return [r for r in data if isinstance(r, dict)]

    def approved_submissions(
        self,
        country: Optional[str] = None,
        category: Optional[Category] = None,
    ) -> List[SubmissionRef]:
        out: List[SubmissionRef] = []
        skipped = 0

        for row in self._rows():
            try:
                ref = submission_from_row(row)
            except ValueError as e:
                skipped += 1
                logger.warning(f"Skipping submission {row.get('id', '?')}: {e}")
                continue
            if ref is None:
                continue
            if country is not None and ref.country_code != country:
                continue
            if category is not None and ref.category != category:
                continue
            out.append(ref)

        logger.debug(f"{len(out)} approved submissions ({skipped} skipped) from {self.path}")
        return out
