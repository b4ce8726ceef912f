from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class AuthHealthStatus(str, Enum):
    OK = "ok"
    OK_API_QUOTA = "ok_api_quota"
    AUTH_INVALID = "auth_invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthHealthResult:
    provider: str
    status: AuthHealthStatus
    message: str


@dataclass(frozen=True)
class Credential:
    """
    The single OAuth credential authorizing playlist writes.

    expires_at is an epoch timestamp in seconds.
    """

    subject_id: str
    access_token: str
    refresh_token: str
    expires_at: float

    def is_expired(self, now: float, skew: float = 0) -> bool:
        return now >= self.expires_at - skew

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        return cls(
            subject_id=str(data["subject_id"]),
            access_token=str(data["access_token"]),
            refresh_token=str(data["refresh_token"]),
            expires_at=float(data["expires_at"]),
        )


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool
    account_identifier: Optional[str] = None
    token_expired: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connected": self.connected,
            "accountIdentifier": self.account_identifier,
            "email": self.account_identifier,
            "tokenExpired": self.token_expired,
        }
