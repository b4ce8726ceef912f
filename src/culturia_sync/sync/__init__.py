from culturia_sync.sync.models import (
    Category,
    PlaylistKey,
    PlaylistRecord,
    SubmissionRef,
    SyncResult,
)
from culturia_sync.sync.request import SyncRequest, SyncValidationError

__all__ = [
    "Category",
    "PlaylistKey",
    "PlaylistRecord",
    "SubmissionRef",
    "SyncRequest",
    "SyncResult",
    "SyncValidationError",
]
