from __future__ import annotations

import threading
import time
from dataclasses import replace
from typing import Callable, Optional, Tuple

from culturia_sync.auth.base import ConnectionStatus, Credential
from culturia_sync.auth.errors import AuthRefreshFailed, Unauthenticated
from culturia_sync.auth.store import CredentialStore
from culturia_sync.logger import get_logger

logger = get_logger(__name__)

# refresh_token -> (access_token, expires_at)
Refresher = Callable[[str], Tuple[str, float]]


class TokenManager:
    """
    Hands out a usable access token, refreshing the stored credential when
    it is expired (or within `skew` seconds of expiring).

    Every read-refresh-persist sequence and every credential write happens
    under one lock, so concurrent callers never write conflicting tokens.
    """

    def __init__(
        self,
        store: CredentialStore,
        refresher: Refresher,
        *,
        skew: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._refresher = refresher
        self._skew = skew
        self._clock = clock
        self._lock = threading.Lock()

    def get_valid_access_token(self) -> str:
        with self._lock:
            cred = self._store.load()
            if cred is None:
                raise Unauthenticated("YouTube not connected. Please authenticate first.")

            if not cred.is_expired(self._clock(), self._skew):
                return cred.access_token

            logger.info("oauth.refresh.start")
            try:
                access_token, expires_at = self._refresher(cred.refresh_token)
            except AuthRefreshFailed:
                logger.error("oauth.refresh.rejected (reconnect required)")
                raise

            self._store.save(replace(cred, access_token=access_token, expires_at=expires_at))
            logger.info("oauth.refresh.ok")
            return access_token

    def connect(self, credential: Credential) -> None:
        with self._lock:
            self._store.save(credential)
        logger.info(f"oauth.connected account={credential.subject_id}")

    def disconnect(self) -> bool:
        with self._lock:
            removed = self._store.delete()
        logger.info("oauth.disconnected" if removed else "oauth.disconnect.noop")
        return removed

    def current(self) -> Optional[Credential]:
        with self._lock:
            return self._store.load()

    def status(self) -> ConnectionStatus:
        cred = self.current()
        if cred is None:
            return ConnectionStatus(connected=False)
        return ConnectionStatus(
            connected=True,
            account_identifier=cred.subject_id,
            token_expired=cred.is_expired(self._clock()),
        )
