"""
orchestrator.py

Entry points for a sync run: sync_all(), sync_country(), sync_category().

Per (country, category) pair:
    resolve playlist -> diff against current contents -> insert missing

Failure policy:
- Any AuthError (no credential, refresh rejected, token rejected mid-run)
  ends the run with a single error and zero counts
- Everything else is recorded against the item or pair and the run goes on
- Quota exhaustion stops the current pair; later calls in the same run fail
  fast, and the next run starts with a fresh quota
- Only one run is in flight per process
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Dict, List, Optional

from culturia_sync.auth.errors import AuthError
from culturia_sync.auth.token_manager import TokenManager
from culturia_sync.content import ContentQuery, ContentQueryError
from culturia_sync.logger import get_logger
from culturia_sync.providers.youtube.api_manager import (
    RemoteError,
    RemoteRejected,
    RemoteUnavailable,
)
from culturia_sync.providers.youtube.client import YouTubePlaylistClient
from culturia_sync.sync.differ import VideoDiffer
from culturia_sync.sync.models import (
    PairOutcome,
    PlaylistKey,
    SubmissionRef,
    SyncResult,
)
from culturia_sync.sync.request import SyncRequest
from culturia_sync.sync.resolver import PlaylistResolver

logger = get_logger(__name__)

# Serializes every run in the process, whichever surface triggered it.
_SYNC_LOCK = threading.Lock()


def group_by_key(refs: List[SubmissionRef]) -> "OrderedDict[PlaylistKey, List[SubmissionRef]]":
    grouped: Dict[PlaylistKey, List[SubmissionRef]] = {}
    for ref in refs:
        grouped.setdefault(ref.key, []).append(ref)
    return OrderedDict(sorted(grouped.items()))


def fold(outcomes: List[PairOutcome]) -> SyncResult:
    errors: List[str] = []
    for o in outcomes:
        errors.extend(o.errors)

    return SyncResult(
        success=not errors,
        playlists_created=sum(1 for o in outcomes if o.created),
        playlists_updated=sum(1 for o in outcomes if not o.created and o.added > 0),
        videos_added=sum(o.added for o in outcomes),
        errors=errors,
    )


class SyncOrchestrator:
    def __init__(
        self,
        tokens: TokenManager,
        client: YouTubePlaylistClient,
        resolver: PlaylistResolver,
        differ: VideoDiffer,
        content: ContentQuery,
        *,
        lock: Optional[threading.Lock] = None,
    ) -> None:
        self._tokens = tokens
        self._client = client
        self._resolver = resolver
        self._differ = differ
        self._content = content
        self._lock = lock or _SYNC_LOCK

    # -----------------------------------------------------------------
    # Entry points
    # -----------------------------------------------------------------

    def sync_all(self) -> SyncResult:
        return self.run(SyncRequest.build("all"))

    def sync_country(self, country: str) -> SyncResult:
        return self.run(SyncRequest.build("country", country))

    def sync_category(self, country: str, category: str) -> SyncResult:
        return self.run(SyncRequest.build("category", country, category))

    def run(self, request: SyncRequest) -> SyncResult:
        if not self._lock.acquire(blocking=False):
            logger.info("sync.run.waiting (another sync is in progress)")
            self._lock.acquire()
        try:
            return self._run(request)
        finally:
            self._lock.release()

    # -----------------------------------------------------------------
    # Run
    # -----------------------------------------------------------------

    def _run(self, request: SyncRequest) -> SyncResult:
        logger.info(f"sync.run.start scope={request.describe()}")

        # Quota is per run; a later run may land after the daily reset.
        self._client.reset_quota()

        # Fail before touching any playlist if the account is not usable.
        try:
            self._tokens.get_valid_access_token()
        except AuthError as e:
            logger.error(f"sync.run.aborted (auth): {e}")
            return SyncResult.fatal(str(e))
        except RemoteUnavailable as e:
            logger.error(f"sync.run.failed (token endpoint unreachable): {e}")
            return SyncResult(success=False, errors=[str(e)])

        try:
            candidates = self._content.approved_submissions(
                country=request.country, category=request.category
            )
        except ContentQueryError as e:
            logger.error(f"sync.run.failed (content): {e}")
            return SyncResult(success=False, errors=[str(e)])

        pairs = group_by_key(candidates)
        logger.info(
            f"sync.run.plan pairs={len(pairs)} candidates={len(candidates)}"
        )

        outcomes: List[PairOutcome] = []
        for key, refs in pairs.items():
            try:
                outcomes.append(self._sync_pair(key, refs))
            except AuthError as e:
                logger.error(f"sync.run.aborted (auth) at {key}: {e}")
                return SyncResult.fatal(str(e))

        result = fold(outcomes)

        logger.info(
            f"sync.run.done status={result.status} "
            f"created={result.playlists_created} updated={result.playlists_updated} "
            f"added={result.videos_added} errors={len(result.errors)}"
        )
        for err in result.errors:
            logger.warning(err)
        return result

    def _sync_pair(self, key: PlaylistKey, refs: List[SubmissionRef]) -> PairOutcome:
        outcome = PairOutcome(key=key)
        logger.debug(f"{key}: {len(refs)} approved candidate(s)")

        try:
            playlist_id, created = self._resolver.resolve(key)
        except RemoteError as e:
            outcome.error(f"could not resolve playlist: {e}")
            return outcome
        except OSError as e:
            outcome.error(f"could not save playlist record: {e}")
            return outcome

        outcome.playlist_id = playlist_id
        outcome.created = created

        missing = self._diff(outcome, refs)
        if missing is None:
            return outcome

        outcome.already_present = len({r.remote_video_id for r in refs}) - len(missing)

        for ref in missing:
            try:
                self._client.insert_item(outcome.playlist_id, ref.remote_video_id)
            except RemoteRejected as e:
                if e.is_duplicate:
                    logger.debug(f"{key}: {ref.remote_video_id} already in playlist")
                    outcome.already_present += 1
                    continue
                if e.is_quota:
                    outcome.error(f"quota exhausted; stopped before {ref.remote_video_id}")
                    break
                outcome.error(
                    f"failed to add video {ref.remote_video_id} (submission {ref.id}): {e}"
                )
                continue
            except RemoteUnavailable as e:
                outcome.error(
                    f"failed to add video {ref.remote_video_id} (submission {ref.id}): {e}"
                )
                continue

            outcome.added += 1
            logger.debug(f"{key}: added {ref.remote_video_id} (submission {ref.id})")

        if outcome.added:
            try:
                self._resolver.touch(key)
            except OSError as e:
                outcome.error(f"could not save playlist record: {e}")

        logger.info(
            f"{key}: playlist={outcome.playlist_id} created={outcome.created} "
            f"added={outcome.added} present={outcome.already_present} "
            f"errors={len(outcome.errors)}"
        )
        return outcome

    def _diff(
        self, outcome: PairOutcome, refs: List[SubmissionRef]
    ) -> Optional[List[SubmissionRef]]:
        """
        Missing candidates for the pair's playlist, or None if the pair
        cannot continue. A recorded playlist deleted on YouTube is
        recreated once.
        """
        key = outcome.key
        try:
            return self._differ.missing(outcome.playlist_id, refs)
        except RemoteRejected as e:
            if not e.is_playlist_not_found:
                outcome.error(f"could not read playlist {outcome.playlist_id}: {e}")
                return None
        except RemoteUnavailable as e:
            outcome.error(f"could not read playlist {outcome.playlist_id}: {e}")
            return None

        try:
            outcome.playlist_id = self._resolver.recreate(key)
            outcome.created = True
            return self._differ.missing(outcome.playlist_id, refs)
        except RemoteError as e:
            outcome.error(f"could not recreate missing playlist: {e}")
            return None
        except OSError as e:
            outcome.error(f"could not save playlist record: {e}")
            return None
