from __future__ import annotations

from culturia_sync.auth.base import (
    AuthHealthResult,
    AuthHealthStatus,
    ConnectionStatus,
    Credential,
)
from culturia_sync.auth.errors import (
    AuthError,
    AuthFailed,
    AuthRefreshFailed,
    Unauthenticated,
)

__all__ = [
    "AuthError",
    "AuthFailed",
    "AuthHealthResult",
    "AuthHealthStatus",
    "AuthRefreshFailed",
    "ConnectionStatus",
    "Credential",
    "Unauthenticated",
]
