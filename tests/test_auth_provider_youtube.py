from urllib.parse import parse_qs, urlparse

import pytest
from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials

from culturia_sync.auth import AuthHealthStatus, AuthRefreshFailed, Unauthenticated
from culturia_sync.auth.providers.youtube import YouTubeOAuthProvider
from culturia_sync.env import ConfigError, reset_env_caches
from culturia_sync.providers.youtube.api_manager import RemoteRejected, RemoteUnavailable


@pytest.fixture
def oauth_env(monkeypatch):
    monkeypatch.setenv("YOUTUBE_CLIENT_ID", "client-123.apps.googleusercontent.com")
    monkeypatch.setenv("YOUTUBE_CLIENT_SECRET", "shh")
    monkeypatch.setenv("YOUTUBE_REDIRECT_URI", "https://culturia.xyz/api/auth/youtube/callback")
    reset_env_caches()


def test_authorization_url_requests_offline_consent(oauth_env):
    url = YouTubeOAuthProvider().authorization_url()
    qs = parse_qs(urlparse(url).query)

    assert qs["client_id"] == ["client-123.apps.googleusercontent.com"]
    assert qs["access_type"] == ["offline"]
    assert qs["prompt"] == ["consent"]
    assert qs["redirect_uri"] == ["https://culturia.xyz/api/auth/youtube/callback"]
    assert "https://www.googleapis.com/auth/youtube" in qs["scope"][0]


def test_authorization_url_needs_client_config():
    with pytest.raises(ConfigError):
        YouTubeOAuthProvider().authorization_url()


def test_refresh_rejection_is_auth_failure(oauth_env, monkeypatch):
    def refuse(self, request):
        raise RefreshError("invalid_grant: Token has been expired or revoked.")

    monkeypatch.setattr(Credentials, "refresh", refuse)

    with pytest.raises(AuthRefreshFailed):
        YouTubeOAuthProvider().refresh("revoked")


def test_refresh_network_failure_is_unavailable(oauth_env, monkeypatch):
    def unreachable(self, request):
        raise TransportError("connection reset")

    monkeypatch.setattr(Credentials, "refresh", unreachable)

    with pytest.raises(RemoteUnavailable):
        YouTubeOAuthProvider().refresh("refresh")


class _Client:
    def __init__(self, exc=None):
        self.exc = exc

    def channel_id(self):
        if self.exc:
            raise self.exc
        return "UC123"


@pytest.mark.parametrize(
    "exc,expected",
    [
        (None, AuthHealthStatus.OK),
        (RemoteRejected("quota", status=403, reason="quotaExceeded"), AuthHealthStatus.OK_API_QUOTA),
        (Unauthenticated("not connected"), AuthHealthStatus.AUTH_INVALID),
        (AuthRefreshFailed("revoked"), AuthHealthStatus.AUTH_INVALID),
        (RemoteUnavailable("timeout"), AuthHealthStatus.FAILED),
        (RemoteRejected("forbidden", status=403, reason="forbidden"), AuthHealthStatus.FAILED),
    ],
)
def test_health_check_mapping(exc, expected):
    assert YouTubeOAuthProvider().health_check(_Client(exc)).status == expected
