"""
client.py

Thin YouTube Data API wrapper for the four playlist operations the sync
needs. Authorization comes from the TokenManager; every call goes through
execute_with_retry() so failures surface as RemoteUnavailable /
RemoteRejected.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Set

import httplib2
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build

from culturia_sync import config
from culturia_sync.auth.token_manager import TokenManager
from culturia_sync.logger import get_logger
from culturia_sync.providers.youtube.api_manager import (
    QuotaTripwire,
    RemoteRejected,
    execute_with_retry,
)

logger = get_logger(__name__)

YouTubeService = Any
ServiceFactory = Callable[[str, int], YouTubeService]


@dataclass(frozen=True)
class PlaylistSummary:
    id: str
    title: str


def build_youtube_service(access_token: str, timeout: int) -> YouTubeService:
    """YouTube v3 resource whose transport carries a request timeout."""
    creds = Credentials(token=access_token)
    http = AuthorizedHttp(creds, http=httplib2.Http(timeout=timeout))
    return build("youtube", "v3", http=http, cache_discovery=False)


class YouTubePlaylistClient:
    def __init__(
        self,
        tokens: TokenManager,
        *,
        timeout: int = config.DEFAULT_REQUEST_TIMEOUT_SEC,
        max_retries: int = config.DEFAULT_MAX_RETRIES,
        backoff_base: float = config.DEFAULT_BACKOFF_BASE_SEC,
        mutation_sleep: float = config.DEFAULT_MUTATION_SLEEP_SEC,
        privacy_status: str = config.DEFAULT_PLAYLIST_PRIVACY,
        service_factory: ServiceFactory = build_youtube_service,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._tokens = tokens
        self._timeout = timeout
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._mutation_sleep = mutation_sleep
        self._privacy_status = privacy_status
        self._service_factory = service_factory
        self._sleep = sleep
        self._tripwire = QuotaTripwire()

        self._service: Optional[YouTubeService] = None
        self._service_token: Optional[str] = None

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _youtube(self) -> YouTubeService:
        token = self._tokens.get_valid_access_token()
        if self._service is None or token != self._service_token:
            self._service = self._service_factory(token, self._timeout)
            self._service_token = token
        return self._service

    def _execute(
        self,
        request_fn: Callable[[YouTubeService], Any],
        name: str,
        *,
        mutation: bool = False,
    ) -> Any:
        youtube = self._youtube()
        if mutation and self._mutation_sleep > 0:
            self._sleep(self._mutation_sleep)

        def _op() -> Any:
            return request_fn(youtube).execute(num_retries=0)

        return execute_with_retry(
            _op,
            name,
            max_retries=self._max_retries,
            backoff_base=self._backoff_base,
            tripwire=self._tripwire,
            sleep=self._sleep,
        )

    @property
    def quota_exhausted(self) -> bool:
        return self._tripwire.exhausted

    def reset_quota(self) -> None:
        """Forget an exhausted quota; called at the start of every run."""
        self._tripwire.reset()

    # -----------------------------------------------------------------
    # Playlist operations
    # -----------------------------------------------------------------

    def list_playlists(self) -> List[PlaylistSummary]:
        """All playlists owned by the connected account."""
        out: List[PlaylistSummary] = []
        page_token: Optional[str] = None

        while True:
            resp = self._execute(
                lambda yt: yt.playlists().list(
                    part="snippet",
                    mine=True,
                    maxResults=config.YOUTUBE_BATCH_SIZE,
                    pageToken=page_token,
                ),
                "playlists.list",
            )

            for it in resp.get("items", []):
                pid = it.get("id")
                title = (it.get("snippet") or {}).get("title", "")
                if isinstance(pid, str):
                    out.append(PlaylistSummary(id=pid, title=str(title)))

            page_token = resp.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Found {len(out)} playlists on the account")
        return out

    def create_playlist(self, title: str, description: str) -> str:
        resp = self._execute(
            lambda yt: yt.playlists().insert(
                part="snippet,status",
                body={
                    "snippet": {"title": title, "description": description},
                    "status": {"privacyStatus": self._privacy_status},
                },
            ),
            "playlists.insert",
            mutation=True,
        )

        playlist_id = resp.get("id")
        if not isinstance(playlist_id, str) or not playlist_id:
            raise RemoteRejected("playlists.insert: no playlist id returned", reason="noId")

        logger.info(f"Created playlist {playlist_id}: {title!r}")
        return playlist_id

    def list_playlist_video_ids(self, playlist_id: str) -> Set[str]:
        """
        Every video id currently in the playlist.

        All pages are read; a partial set would let duplicates through.
        """
        video_ids: Set[str] = set()
        page_token: Optional[str] = None
        pages = 0

        while True:
            try:
                resp = self._execute(
                    lambda yt: yt.playlistItems().list(
                        part="contentDetails",
                        playlistId=playlist_id,
                        maxResults=config.YOUTUBE_BATCH_SIZE,
                        pageToken=page_token,
                    ),
                    "playlistItems.list",
                )
            except RemoteRejected as e:
                # Any 404 on a listing means the playlist itself is gone.
                if e.status == 404 and not e.is_playlist_not_found:
                    raise RemoteRejected(
                        str(e), status=404, reason="playlistNotFound"
                    ) from e
                raise

            pages += 1
            for it in resp.get("items", []):
                vid = (it.get("contentDetails") or {}).get("videoId")
                if isinstance(vid, str) and vid:
                    video_ids.add(vid)

            page_token = resp.get("nextPageToken")
            if not page_token:
                break

        logger.debug(
            f"Playlist {playlist_id}: {len(video_ids)} videos across {pages} page(s)"
        )
        return video_ids

    def insert_item(self, playlist_id: str, video_id: str) -> str:
        """Append a video. Returns the playlistItem id."""
        resp = self._execute(
            lambda yt: yt.playlistItems().insert(
                part="snippet",
                body={
                    "snippet": {
                        "playlistId": playlist_id,
                        "resourceId": {"kind": "youtube#video", "videoId": video_id},
                    }
                },
            ),
            f"playlistItems.insert {video_id}",
            mutation=True,
        )
        return str(resp.get("id") or "")

    def channel_id(self) -> str:
        """Cheap authenticated call used by the auth health check."""
        resp = self._execute(
            lambda yt: yt.channels().list(part="id", mine=True, maxResults=1),
            "channels.list",
        )
        items = resp.get("items") or []
        return str(items[0].get("id", "")) if items else ""
