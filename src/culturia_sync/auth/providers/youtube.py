from __future__ import annotations

import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from culturia_sync import config
from culturia_sync.auth.base import AuthHealthResult, AuthHealthStatus, Credential
from culturia_sync.auth.errors import AuthError, AuthFailed, AuthRefreshFailed
from culturia_sync.env import Environment, get_env
from culturia_sync.logger import get_logger
from culturia_sync.providers.youtube.api_manager import RemoteRejected, RemoteUnavailable

# Google may grant extra scopes (openid) alongside the requested ones.
os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")


def _expiry_to_timestamp(expiry: Optional[datetime]) -> float:
    # google-auth reports expiry as a naive UTC datetime
    if expiry is None:
        return time.time() + config.DEFAULT_TOKEN_LIFETIME_SEC
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry.timestamp()


class YouTubeOAuthProvider:
    """
    Google OAuth web flow for the YouTube account that owns the playlists.

    - authorization_url() starts the consent flow
    - exchange_code() turns the callback code into a Credential
    - refresh() is the TokenManager's refresher
    - health_check() performs a cheap authenticated call to validate auth
    """

    name = "youtube"

    def __init__(self, env: Optional[Environment] = None) -> None:
        self._env = env or get_env()
        self._logger = get_logger("auth.youtube")

    # -----------------------------------------------------------------
    # Consent flow
    # -----------------------------------------------------------------

    def _client_config(self) -> Dict[str, Any]:
        return {
            "web": {
                "client_id": self._env.client_id,
                "client_secret": self._env.client_secret,
                "auth_uri": config.GOOGLE_AUTH_URI,
                "token_uri": config.GOOGLE_TOKEN_URI,
                "redirect_uris": [self._env.redirect_uri],
            }
        }

    def _flow(self) -> Flow:
        # The callback runs in a different request than the redirect, so no
        # PKCE verifier can be carried between them.
        return Flow.from_client_config(
            self._client_config(),
            scopes=config.YOUTUBE_OAUTH_SCOPES,
            redirect_uri=self._env.redirect_uri,
            autogenerate_code_verifier=False,
        )

    def authorization_url(self) -> str:
        url, _state = self._flow().authorization_url(
            access_type="offline",
            prompt="consent",  # forces Google to issue a refresh token
            include_granted_scopes="true",
        )
        return url

    def exchange_code(self, code: str) -> Credential:
        flow = self._flow()
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            self._logger.error(f"Authorization code exchange failed: {e}")
            raise AuthFailed(str(e)) from e

        creds = flow.credentials
        if not creds.token or not creds.refresh_token:
            raise AuthFailed("Failed to get tokens from authorization code")

        return Credential(
            subject_id=self.account_email(creds),
            access_token=creds.token,
            refresh_token=creds.refresh_token,
            expires_at=_expiry_to_timestamp(creds.expiry),
        )

    def account_email(self, creds: Credentials) -> str:
        try:
            oauth2 = build("oauth2", "v2", credentials=creds, cache_discovery=False)
            info = oauth2.userinfo().get().execute()
        except Exception as e:
            self._logger.warning(f"Could not read account e-mail: {e}")
            return "Unknown"
        return str(info.get("email") or "Unknown")

    # -----------------------------------------------------------------
    # Token lifecycle
    # -----------------------------------------------------------------

    def refresh(self, refresh_token: str) -> Tuple[str, float]:
        creds = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=config.GOOGLE_TOKEN_URI,
            client_id=self._env.client_id,
            client_secret=self._env.client_secret,
        )

        try:
            self._logger.debug("Refreshing expired OAuth token...")
            creds.refresh(Request())
        except RefreshError as e:
            raise AuthRefreshFailed(f"Failed to refresh access token: {e}") from e
        except TransportError as e:
            raise RemoteUnavailable(f"Token endpoint unreachable: {e}") from e

        if not creds.token:
            raise AuthRefreshFailed("Failed to refresh access token")

        return creds.token, _expiry_to_timestamp(creds.expiry)

    # -----------------------------------------------------------------
    # Health
    # -----------------------------------------------------------------

    def health_check(self, client: Any) -> AuthHealthResult:
        """
        Validates OAuth by making a cheap authenticated request through the
        playlist client. Treats API quota exhaustion as OAuth OK.
        """
        self._logger.info("oauth.check.start")

        try:
            client.channel_id()
        except AuthError as e:
            self._logger.error(f"oauth.check.auth_invalid: {e}")
            return AuthHealthResult(
                provider=self.name,
                status=AuthHealthStatus.AUTH_INVALID,
                message="OAuth INVALID - reauthentication required",
            )
        except RemoteRejected as e:
            if e.is_quota:
                self._logger.warning("oauth.check.ok_quota_exhausted")
                return AuthHealthResult(
                    provider=self.name,
                    status=AuthHealthStatus.OK_API_QUOTA,
                    message="OAuth OK (API quota exhausted)",
                )
            self._logger.error(f"oauth.check.failed: {e}")
            return AuthHealthResult(
                provider=self.name,
                status=AuthHealthStatus.FAILED,
                message=f"OAuth check failed: {e}",
            )
        except RemoteUnavailable as e:
            self._logger.error(f"oauth.check.failed: {e}")
            return AuthHealthResult(
                provider=self.name,
                status=AuthHealthStatus.FAILED,
                message=f"OAuth check failed (YouTube unreachable): {e}",
            )

        self._logger.info("oauth.check.ok")
        return AuthHealthResult(
            provider=self.name,
            status=AuthHealthStatus.OK,
            message="OAuth OK",
        )
