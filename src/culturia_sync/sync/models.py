from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from culturia_sync import config


class Category(str, Enum):
    INSPIRATION = "inspiration"
    MUSIC = "music"
    COMEDY = "comedy"
    COOKING = "cooking"
    STREET_VOICES = "street_voices"

    @classmethod
    def parse(cls, value: Any) -> "Category":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unknown category: {value!r}. "
                f"Expected one of: {', '.join(c.value for c in cls)}"
            ) from None

    @property
    def label(self) -> str:
        return config.CATEGORY_LABELS[self.value]


def normalize_country(code: Any) -> str:
    """Upper-cased ISO 3166 alpha-2 or alpha-3 code; ValueError otherwise."""
    normalized = str(code or "").strip().upper()
    if len(normalized) not in (2, 3) or not normalized.isalpha() or not normalized.isascii():
        raise ValueError(f"Invalid country code: {code!r}")
    return normalized


@dataclass(frozen=True, order=True)
class PlaylistKey:
    country_code: str
    category: Category

    @classmethod
    def of(cls, country_code: Any, category: Any) -> "PlaylistKey":
        return cls(normalize_country(country_code), Category.parse(category))

    @property
    def slug(self) -> str:
        return f"{self.country_code}:{self.category.value}"

    def __str__(self) -> str:
        return f"{self.country_code}-{self.category.value}"


@dataclass(frozen=True)
class SubmissionRef:
    """Approved-content projection consumed by the sync. Read-only."""

    id: str
    remote_video_id: str
    country_code: str
    category: Category

    @property
    def key(self) -> PlaylistKey:
        return PlaylistKey(self.country_code, self.category)


@dataclass
class PlaylistRecord:
    key: PlaylistKey
    remote_playlist_id: str
    playlist_name: str = ""
    playlist_url: str = ""
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "country_code": self.key.country_code,
            "category": self.key.category.value,
            "remote_playlist_id": self.remote_playlist_id,
            "playlist_name": self.playlist_name,
            "playlist_url": self.playlist_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlaylistRecord":
        return cls(
            key=PlaylistKey.of(data["country_code"], data["category"]),
            remote_playlist_id=str(data["remote_playlist_id"]),
            playlist_name=str(data.get("playlist_name", "")),
            playlist_url=str(data.get("playlist_url", "")),
            created_at=str(data.get("created_at", "")),
            updated_at=str(data.get("updated_at", "")),
        )


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


@dataclass
class PairOutcome:
    """What happened to one (country, category) playlist during a run."""

    key: PlaylistKey
    playlist_id: Optional[str] = None
    created: bool = False
    added: int = 0
    already_present: int = 0
    errors: List[str] = field(default_factory=list)

    def error(self, message: str) -> None:
        self.errors.append(f"{self.key}: {message}")


@dataclass
class SyncResult:
    success: bool
    playlists_created: int = 0
    playlists_updated: int = 0
    videos_added: int = 0
    errors: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_now_iso)
    # Set when an auth failure ended the run; not part of the wire shape.
    aborted: bool = False

    @classmethod
    def fatal(cls, message: str) -> "SyncResult":
        return cls(success=False, errors=[message], aborted=True)

    @property
    def status(self) -> str:
        if self.success:
            return "success"
        if self.aborted or not (
            self.videos_added or self.playlists_created or self.playlists_updated
        ):
            return "failed"
        return "partial"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "playlistsCreated": self.playlists_created,
            "playlistsUpdated": self.playlists_updated,
            "videosAdded": self.videos_added,
            "errors": list(self.errors),
            "timestamp": self.timestamp,
        }
