"""
services.py

Wires the sync engine from the environment. Both the CLI and the HTTP app
build exactly one Services per process.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from culturia_sync.auth.providers.youtube import YouTubeOAuthProvider
from culturia_sync.auth.store import CredentialStore
from culturia_sync.auth.token_manager import TokenManager
from culturia_sync.content import ContentQuery, SubmissionsFile
from culturia_sync.env import Environment, get_env
from culturia_sync.env import paths
from culturia_sync.providers.youtube.client import YouTubePlaylistClient
from culturia_sync.sync.differ import VideoDiffer
from culturia_sync.sync.orchestrator import SyncOrchestrator
from culturia_sync.sync.resolver import PlaylistRecordStore, PlaylistResolver
from culturia_sync.synclog import SyncLog


@dataclass
class Services:
    env: Environment
    oauth: YouTubeOAuthProvider
    tokens: TokenManager
    client: YouTubePlaylistClient
    records: PlaylistRecordStore
    resolver: PlaylistResolver
    content: ContentQuery
    orchestrator: SyncOrchestrator
    sync_log: SyncLog


def build_services(
    env: Optional[Environment] = None,
    *,
    content: Optional[ContentQuery] = None,
) -> Services:
    env = env or get_env()

    oauth = YouTubeOAuthProvider(env)
    tokens = TokenManager(
        CredentialStore(paths.credential_file()),
        oauth.refresh,
        skew=env.token_refresh_skew,
    )
    client = YouTubePlaylistClient(
        tokens,
        timeout=env.request_timeout,
        max_retries=env.max_retries,
        backoff_base=env.backoff_base,
        mutation_sleep=env.mutation_sleep,
        privacy_status=env.playlist_privacy,
    )
    records = PlaylistRecordStore(paths.playlist_records_file())
    resolver = PlaylistResolver(client, records)
    content = content or SubmissionsFile(paths.submissions_file())

    orchestrator = SyncOrchestrator(
        tokens,
        client,
        resolver,
        VideoDiffer(client),
        content,
    )

    return Services(
        env=env,
        oauth=oauth,
        tokens=tokens,
        client=client,
        records=records,
        resolver=resolver,
        content=content,
        orchestrator=orchestrator,
        sync_log=SyncLog(paths.sync_log_file()),
    )
