import os

import pytest

from culturia_sync.env import ConfigError, _load_dotenv, get_env, reset_env_caches


def test_env_defaults():
    env = get_env()
    assert env.verbose is False
    assert env.quiet is False
    assert env.max_retries == 1
    assert env.playlist_privacy == "public"
    assert env.request_timeout > 0


def test_env_is_cached_until_reset(monkeypatch):
    first = get_env()
    monkeypatch.setenv("YT_MAX_RETRIES", "3")
    assert get_env() is first

    reset_env_caches()
    assert get_env().max_retries == 3


def test_env_bad_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("YT_REQUEST_TIMEOUT", "soon")
    monkeypatch.setenv("YT_MAX_RETRIES", "-4")

    env = get_env()
    assert env.request_timeout == 30
    assert env.max_retries == 0


def test_client_secret_required_only_when_used():
    env = get_env()
    with pytest.raises(ConfigError):
        _ = env.client_secret


def test_dotenv_never_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("YOUTUBE_CLIENT_ID", "from-shell")
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "# comment\n"
        "YOUTUBE_CLIENT_ID=from-file\n"
        'export YOUTUBE_CLIENT_SECRET="s3cret"  # inline\n'
        "CULTURIA_ADMIN_URL='https://culturia.xyz/admin'\n",
        encoding="utf-8",
    )

    try:
        _load_dotenv(dotenv)
        reset_env_caches()
        env = get_env()

        assert env.client_id == "from-shell"
        assert env.client_secret == "s3cret"
        assert env.admin_url == "https://culturia.xyz/admin"
    finally:
        os.environ.pop("YOUTUBE_CLIENT_SECRET", None)
        os.environ.pop("CULTURIA_ADMIN_URL", None)
