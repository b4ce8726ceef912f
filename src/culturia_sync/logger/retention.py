from __future__ import annotations

from pathlib import Path


def enforce_retention(log_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest `keep` log files. Returns the removed paths."""
    if keep <= 0:
        return []

    logs = sorted(
        log_dir.glob("*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )

    removed: list[Path] = []
    for old in logs[keep:]:
        try:
            old.unlink()
            removed.append(old)
        except OSError:
            continue
    return removed
