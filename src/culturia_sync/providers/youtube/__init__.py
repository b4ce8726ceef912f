from __future__ import annotations

from culturia_sync.providers.youtube.api_manager import (
    RemoteError,
    RemoteRejected,
    RemoteUnavailable,
)

__all__ = ["RemoteError", "RemoteRejected", "RemoteUnavailable"]
