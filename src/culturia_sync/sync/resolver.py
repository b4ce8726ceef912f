"""
resolver.py

Maps a (country, category) PlaylistKey to a YouTube playlist id.

- Records are cached in a local JSON file, one per key
- Unmapped keys adopt an existing playlist with the exact title, else
  create one; the record is persisted before the id is returned
- recreate() is the only self-healing path, used when YouTube reports that
  a recorded playlist no longer exists
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

import pycountry

from culturia_sync import config
from culturia_sync.logger import get_logger
from culturia_sync.providers.youtube.client import PlaylistSummary
from culturia_sync.sync.models import PlaylistKey, PlaylistRecord, utc_now_iso

logger = get_logger(__name__)


class PlaylistClient(Protocol):
    def list_playlists(self) -> List[PlaylistSummary]: ...

    def create_playlist(self, title: str, description: str) -> str: ...


# ----------------------------
# Naming
# ----------------------------


def _lookup_country(code: str):
    field = "alpha_2" if len(code) == 2 else "alpha_3"
    return pycountry.countries.get(**{field: code.upper()})


def country_name(code: str) -> str:
    country = _lookup_country(code)
    if country is None:
        return code.upper()
    return getattr(country, "common_name", None) or country.name


def country_flag(code: str) -> str:
    """Regional-indicator emoji for the country; empty if unknown."""
    country = _lookup_country(code)
    if country is None:
        return ""
    return "".join(chr(0x1F1E6 + ord(c) - ord("A")) for c in country.alpha_2.upper())


def playlist_title(key: PlaylistKey) -> str:
    title = config.PLAYLIST_TITLE_TEMPLATE.format(
        country=country_name(key.country_code),
        label=key.category.label,
        flag=country_flag(key.country_code),
        site=config.SITE_NAME,
    )
    return " ".join(title.split())


def playlist_description(key: PlaylistKey) -> str:
    return config.PLAYLIST_DESCRIPTION_TEMPLATE.format(
        label=key.category.label.lower(),
        country=country_name(key.country_code),
        site=config.SITE_NAME,
        url=config.SITE_URL,
    )


def playlist_url(playlist_id: str) -> str:
    return config.PLAYLIST_URL_TEMPLATE.format(playlist_id=playlist_id)


# ----------------------------
# Record store
# ----------------------------


class PlaylistRecordStore:
    """
    JSON file of PlaylistRecords keyed by PlaylistKey.slug, so a key can
    never map to two records.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, PlaylistRecord]:
        if not self.path.exists():
            return {}

        try:
            obj = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Playlist record file unreadable, starting fresh: {e}")
            return {}

        if not isinstance(obj, dict) or obj.get("version") != config.PLAYLIST_RECORDS_VERSION:
            logger.warning("Playlist record file invalid or unsupported; starting fresh.")
            return {}

        records: Dict[str, PlaylistRecord] = {}
        for slug, raw in (obj.get("records") or {}).items():
            try:
                records[slug] = PlaylistRecord.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed playlist record {slug}: {e}")
        return records

    def _write(self, records: Dict[str, PlaylistRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        obj = {
            "version": config.PLAYLIST_RECORDS_VERSION,
            "records": {slug: r.to_dict() for slug, r in sorted(records.items())},
        }
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, ensure_ascii=False, sort_keys=True)
        tmp.replace(self.path)

    def get(self, key: PlaylistKey) -> Optional[PlaylistRecord]:
        with self._lock:
            return self._read().get(key.slug)

    def put(self, record: PlaylistRecord) -> None:
        with self._lock:
            records = self._read()
            records[record.key.slug] = record
            self._write(records)

    def touch(self, key: PlaylistKey) -> None:
        with self._lock:
            records = self._read()
            record = records.get(key.slug)
            if record is None:
                return
            record.updated_at = utc_now_iso()
            self._write(records)

    def all(self) -> List[PlaylistRecord]:
        with self._lock:
            return sorted(self._read().values(), key=lambda r: r.key)


# ----------------------------
# Resolver
# ----------------------------


class PlaylistResolver:
    def __init__(self, client: PlaylistClient, store: PlaylistRecordStore) -> None:
        self._client = client
        self._store = store

    def resolve(self, key: PlaylistKey) -> Tuple[str, bool]:
        """Returns (playlist_id, created)."""
        record = self._store.get(key)
        if record is not None:
            logger.debug(f"{key}: using recorded playlist {record.remote_playlist_id}")
            return record.remote_playlist_id, False

        title = playlist_title(key)

        existing = self._find_by_title(title)
        if existing is not None:
            logger.info(f"{key}: adopting existing playlist {existing} ({title!r})")
            self._record(key, existing, title)
            return existing, False

        playlist_id = self._client.create_playlist(title, playlist_description(key))
        self._record(key, playlist_id, title)
        return playlist_id, True

    def recreate(self, key: PlaylistKey) -> str:
        """Replace a recorded playlist that no longer exists remotely."""
        old = self._store.get(key)
        title = playlist_title(key)
        logger.warning(
            f"{key}: playlist {old.remote_playlist_id if old else '?'} missing on YouTube; recreating"
        )
        playlist_id = self._client.create_playlist(title, playlist_description(key))
        self._record(key, playlist_id, title)
        return playlist_id

    def touch(self, key: PlaylistKey) -> None:
        self._store.touch(key)

    def _find_by_title(self, title: str) -> Optional[str]:
        for playlist in self._client.list_playlists():
            if playlist.title == title:
                return playlist.id
        return None

    def _record(self, key: PlaylistKey, playlist_id: str, title: str) -> None:
        now = utc_now_iso()
        self._store.put(
            PlaylistRecord(
                key=key,
                remote_playlist_id=playlist_id,
                playlist_name=title,
                playlist_url=playlist_url(playlist_id),
                created_at=now,
                updated_at=now,
            )
        )
