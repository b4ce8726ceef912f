"""In-memory stand-ins for YouTube and the submissions datastore."""

from __future__ import annotations

import json
import time
from typing import Dict, List, Optional, Set

import httplib2
from googleapiclient.errors import HttpError

from culturia_sync.auth.base import Credential
from culturia_sync.auth.errors import AuthRefreshFailed
from culturia_sync.auth.store import CredentialStore
from culturia_sync.auth.token_manager import TokenManager
from culturia_sync.providers.youtube.api_manager import RemoteRejected
from culturia_sync.providers.youtube.client import PlaylistSummary, YouTubePlaylistClient
from culturia_sync.sync.differ import VideoDiffer
from culturia_sync.sync.models import Category, SubmissionRef
from culturia_sync.sync.orchestrator import SyncOrchestrator
from culturia_sync.sync.resolver import PlaylistRecordStore, PlaylistResolver


class FakePlaylistClient:
    """
    Mimics the YouTube playlist API closely enough for sync tests.

    Like YouTube, inserting a video that is already present adds it again;
    only the engine's diff keeps playlists free of duplicates.
    """

    def __init__(self) -> None:
        self.playlists: Dict[str, Dict] = {}
        self.calls: List[str] = []
        self.insert_failures: Dict[str, Exception] = {}
        self.list_failures: Dict[str, Exception] = {}
        self.quota_resets = 0
        self._next_id = 1

    def reset_quota(self) -> None:
        self.quota_resets += 1

    def add_playlist(self, title: str, video_ids: Optional[List[str]] = None) -> str:
        pid = f"PL{self._next_id:04d}"
        self._next_id += 1
        self.playlists[pid] = {"title": title, "description": "", "items": list(video_ids or [])}
        return pid

    def delete_playlist(self, playlist_id: str) -> None:
        self.playlists.pop(playlist_id, None)

    def items(self, playlist_id: str) -> List[str]:
        return list(self.playlists[playlist_id]["items"])

    def list_playlists(self) -> List[PlaylistSummary]:
        self.calls.append("list_playlists")
        return [PlaylistSummary(id=pid, title=p["title"]) for pid, p in self.playlists.items()]

    def create_playlist(self, title: str, description: str) -> str:
        self.calls.append("create_playlist")
        pid = self.add_playlist(title)
        self.playlists[pid]["description"] = description
        return pid

    def list_playlist_video_ids(self, playlist_id: str) -> Set[str]:
        self.calls.append("list_playlist_video_ids")
        if playlist_id in self.list_failures:
            raise self.list_failures[playlist_id]
        if playlist_id not in self.playlists:
            raise RemoteRejected(
                f"playlistItems.list: HTTP 404 playlistNotFound ({playlist_id})",
                status=404,
                reason="playlistNotFound",
            )
        return set(self.playlists[playlist_id]["items"])

    def insert_item(self, playlist_id: str, video_id: str) -> str:
        self.calls.append("insert_item")
        if video_id in self.insert_failures:
            raise self.insert_failures[video_id]
        if playlist_id not in self.playlists:
            raise RemoteRejected(
                "playlistItems.insert: HTTP 404 playlistNotFound",
                status=404,
                reason="playlistNotFound",
            )
        self.playlists[playlist_id]["items"].append(video_id)
        return f"PLI-{video_id}"


class FakeRequest:
    def __init__(self, response):
        self.response = response

    def execute(self, num_retries=0):
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeResource:
    """Returns queued responses per method and records every call."""

    def __init__(self, service, name):
        self._service = service
        self._name = name

    def __getattr__(self, method):
        def _call(**kwargs):
            self._service.calls.append((f"{self._name}.{method}", kwargs))
            queue = self._service.responses[f"{self._name}.{method}"]
            return FakeRequest(queue.pop(0))

        return _call


class FakeService:
    """Stands in for the discovery-built YouTube v3 resource."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def playlists(self):
        return FakeResource(self, "playlists")

    def playlistItems(self):
        return FakeResource(self, "playlistItems")

    def channels(self):
        return FakeResource(self, "channels")


def http_error(status, reason="", message="boom"):
    body = {"error": {"code": status, "message": message, "errors": []}}
    if reason:
        body["error"]["errors"].append({"reason": reason, "message": message})
    return HttpError(httplib2.Response({"status": status}), json.dumps(body).encode("utf-8"))


def youtube_client(tokens, service, **kwargs) -> YouTubePlaylistClient:
    """Real client wired to a FakeService, with no sleeping."""
    kwargs.setdefault("mutation_sleep", 0)
    kwargs.setdefault("sleep", lambda s: None)
    return YouTubePlaylistClient(
        tokens,
        service_factory=lambda token, timeout: service,
        **kwargs,
    )


class InMemoryContent:
    def __init__(self, submissions: Optional[List[SubmissionRef]] = None) -> None:
        self.submissions: List[SubmissionRef] = list(submissions or [])
        self.queries: List[tuple] = []

    def add(self, sub_id: str, video_id: str, country: str, category: str) -> SubmissionRef:
        ref = SubmissionRef(
            id=sub_id,
            remote_video_id=video_id,
            country_code=country,
            category=Category(category),
        )
        self.submissions.append(ref)
        return ref

    def approved_submissions(
        self,
        country: Optional[str] = None,
        category: Optional[Category] = None,
    ) -> List[SubmissionRef]:
        self.queries.append((country, category))
        return [
            s
            for s in self.submissions
            if (country is None or s.country_code == country)
            and (category is None or s.category == category)
        ]


class FakeRefresher:
    def __init__(self, token: str = "fresh-token", fail: bool = False) -> None:
        self.token = token
        self.fail = fail
        self.calls = 0

    def __call__(self, refresh_token: str):
        self.calls += 1
        if self.fail:
            raise AuthRefreshFailed("Failed to refresh access token: invalid_grant")
        return self.token, time.time() + 3600


def connected_tokens(tmp_path, *, expired: bool = False, refresher=None) -> TokenManager:
    store = CredentialStore(tmp_path / "credential.json")
    store.save(
        Credential(
            subject_id="curator@culturia.xyz",
            access_token="access-token",
            refresh_token="refresh-token",
            expires_at=time.time() + (-10 if expired else 3600),
        )
    )
    return TokenManager(store, refresher or FakeRefresher())


def make_orchestrator(tmp_path, content, client=None, tokens=None):
    client = client or FakePlaylistClient()
    tokens = tokens or connected_tokens(tmp_path)
    records = PlaylistRecordStore(tmp_path / "playlists.json")
    resolver = PlaylistResolver(client, records)
    orch = SyncOrchestrator(tokens, client, resolver, VideoDiffer(client), content)
    return orch, client, records
