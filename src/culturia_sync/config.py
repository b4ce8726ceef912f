"""
config.py

Central configuration for the Culturia playlist sync.

This file intentionally contains ONLY:
- Constants
- Tunables (defaults; env.py may override)
- Category definitions
- Playlist naming templates

It must NOT contain:
- Business logic
- API calls
- Reading environment variables
"""

from __future__ import annotations

from typing import Dict, List

# ============================================================
# YOUTUBE API - OAUTH
# ============================================================

YOUTUBE_OAUTH_SCOPES: List[str] = [
    "https://www.googleapis.com/auth/youtube",
    "https://www.googleapis.com/auth/userinfo.email",
]

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

DEFAULT_REDIRECT_URI = "http://localhost:3000/api/auth/youtube/callback"
DEFAULT_ADMIN_URL = "http://localhost:3000/admin/youtube"

# Access tokens are treated as expired this many seconds early.
DEFAULT_TOKEN_REFRESH_SKEW_SEC = 60

# Used when Google does not report an expiry for a fresh token.
DEFAULT_TOKEN_LIFETIME_SEC = 3600

# ============================================================
# REQUEST THROTTLING DEFAULTS (env.py may override)
# ============================================================

DEFAULT_REQUEST_TIMEOUT_SEC = 30
DEFAULT_MAX_RETRIES = 1
DEFAULT_BACKOFF_BASE_SEC = 1.0

# Playlist reads/mutations are spaced out to stay under per-account limits
DEFAULT_MUTATION_SLEEP_SEC = 0.5

# YouTube API max page size for playlists.list / playlistItems.list is 50
YOUTUBE_BATCH_SIZE = 50

TRANSIENT_STATUS_CODES = (429, 500, 502, 503, 504)
QUOTA_REASONS = ("quotaExceeded", "dailyLimitExceeded")
RATE_LIMIT_REASONS = ("rateLimitExceeded", "userRateLimitExceeded")
DUPLICATE_REASONS = ("videoAlreadyInPlaylist", "duplicate")

# ============================================================
# CATEGORIES
# ============================================================

CATEGORY_LABELS: Dict[str, str] = {
    "inspiration": "Inspiration",
    "music": "Music",
    "comedy": "Comedy",
    "cooking": "Cooking",
    "street_voices": "Street Voices",
}

# ============================================================
# PLAYLIST NAMING
# ============================================================

SITE_NAME = "Culturia"
SITE_URL = "https://culturia.xyz"

PLAYLIST_TITLE_TEMPLATE = "{country} {label} {flag} | {site}"
PLAYLIST_DESCRIPTION_TEMPLATE = (
    "Authentic {label} from {country}, curated by {site}. "
    "Discover more cultural content at {url}"
)
PLAYLIST_URL_TEMPLATE = "https://www.youtube.com/playlist?list={playlist_id}"

DEFAULT_PLAYLIST_PRIVACY = "public"

# ============================================================
# PERSISTED STATE
# ============================================================

CREDENTIAL_BASENAME = "youtube_credential.json"
PLAYLIST_RECORDS_BASENAME = "youtube_playlists.json"
SYNC_LOG_BASENAME = "youtube_sync_log.jsonl"
SUBMISSIONS_BASENAME = "submissions.json"

PLAYLIST_RECORDS_VERSION = 1

# ============================================================
# LOGGING DEFAULTS (logger/ and env.py control actual behavior)
# ============================================================

DEFAULT_LOG_RETENTION = 30
DEFAULT_LOG_LEVEL = "INFO"
