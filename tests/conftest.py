import logging
import os

import pytest


@pytest.fixture(autouse=True)
def clean_env_and_state(tmp_path, monkeypatch):
    """
    Ensure tests don't leak env, logger state, or cached env views, and
    that persisted state lands in a per-test directory.
    """

    for k in list(os.environ):
        if k.startswith("CULTURIA_") or k.startswith("YT_") or k.startswith("YOUTUBE_"):
            monkeypatch.delenv(k, raising=False)
    for k in ("LOG_LEVEL", "LOG_RETENTION", "TOKEN_REFRESH_SKEW_SEC", "PLAYLIST_PRIVACY"):
        monkeypatch.delenv(k, raising=False)

    monkeypatch.setenv("CULTURIA_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CULTURIA_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("YT_MUTATION_SLEEP_SEC", "0")

    from culturia_sync.env import reset_env_caches

    reset_env_caches()

    # Reset logger global state
    import culturia_sync.logger.state as state

    state.INITIALIZED = False
    state.RUN_ID = None
    state.LOG_DIR = None
    state.LOG_FILE_PATH = None

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    yield

    reset_env_caches()
