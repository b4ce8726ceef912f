from __future__ import annotations

from typing import Iterable, List, Protocol, Set

from culturia_sync.logger import get_logger
from culturia_sync.sync.models import SubmissionRef

logger = get_logger(__name__)


class PlaylistReader(Protocol):
    def list_playlist_video_ids(self, playlist_id: str) -> Set[str]: ...


class VideoDiffer:
    """
    Computes which candidates are not yet in a playlist.

    The playlist is read in full before every diff, so a re-run after a
    successful sync yields nothing to insert.
    """

    def __init__(self, client: PlaylistReader) -> None:
        self._client = client

    def missing(
        self, playlist_id: str, candidates: Iterable[SubmissionRef]
    ) -> List[SubmissionRef]:
        present = self._client.list_playlist_video_ids(playlist_id)

        out: List[SubmissionRef] = []
        seen: Set[str] = set()
        for ref in candidates:
            vid = ref.remote_video_id
            if vid in present or vid in seen:
                continue
            seen.add(vid)
            out.append(ref)

        logger.debug(
            f"Playlist {playlist_id}: {len(present)} present, {len(out)} missing"
        )
        return out
