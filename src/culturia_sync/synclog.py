"""
synclog.py

Append-only JSON-lines log of sync runs, used to show "last sync".

One line per run:
{"sync_type", "country_code", "category", "videos_synced",
 "playlists_created", "playlists_updated", "status", "error_message",
 "synced_at"}
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from culturia_sync.logger import get_logger
from culturia_sync.sync.models import SyncResult
from culturia_sync.sync.request import SyncRequest

logger = get_logger(__name__)


def entry_for(request: SyncRequest, result: SyncResult) -> Dict[str, Any]:
    return {
        "sync_type": request.scope,
        "country_code": request.country,
        "category": request.category.value if request.category else None,
        "videos_synced": result.videos_added,
        "playlists_created": result.playlists_created,
        "playlists_updated": result.playlists_updated,
        "status": result.status,
        "error_message": "; ".join(result.errors) if result.errors else None,
        "synced_at": result.timestamp,
    }


class SyncLog:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, request: SyncRequest, result: SyncResult) -> Dict[str, Any]:
        entry = entry_for(request, result)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        return entry

    def tail(self, n: int = 10) -> List[Dict[str, Any]]:
        """Newest-last list of the last `n` entries. Unparseable lines are skipped."""
        if n <= 0 or not self.path.exists():
            return []

        with self._lock:
            lines = self.path.read_text(encoding="utf-8").splitlines()

        out: List[Dict[str, Any]] = []
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except ValueError:
                logger.debug(f"Skipping unparseable sync log line: {line[:80]!r}")
                continue
            if isinstance(obj, dict):
                out.append(obj)
        return out[-n:]

    def last(self) -> Optional[Dict[str, Any]]:
        entries = self.tail(1)
        return entries[0] if entries else None
