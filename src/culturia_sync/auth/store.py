"""
store.py

Persistence for the single live OAuth credential.

The credential is kept as one JSON file with owner-only permissions.
Exactly one credential is meaningful at a time; saving replaces it.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from culturia_sync.auth.base import Credential
from culturia_sync.logger import get_logger

logger = get_logger(__name__)


class CredentialStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Credential]:
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return Credential.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Stored credential is unreadable; treating as missing: {e}")
            return None

    def save(self, credential: Credential) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(credential.to_dict(), indent=2), encoding="utf-8")
        try:
            os.chmod(tmp, 0o600)
        except OSError:
            logger.debug("Could not restrict permissions on credential file")
        tmp.replace(self.path)
        logger.debug(f"Saved credential for {credential.subject_id}")

    def delete(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("Deleted stored credential")
        return True
