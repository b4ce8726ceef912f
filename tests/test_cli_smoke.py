import os
import subprocess
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent.parent / "src"


def _run(tmp_path, *args):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    env["CULTURIA_DATA_DIR"] = str(tmp_path / "data")
    env["CULTURIA_LOGS_DIR"] = str(tmp_path / "logs")

    return subprocess.run(
        [sys.executable, "-m", "culturia_sync", *args],
        capture_output=True,
        text=True,
        env=env,
    )


def test_auth_help_runs(tmp_path):
    assert _run(tmp_path, "auth", "--help").returncode == 0


def test_sync_help_runs(tmp_path):
    result = _run(tmp_path, "sync", "category", "--help")
    assert result.returncode == 0
    assert "country" in result.stdout


def test_help_command_runs(tmp_path):
    assert _run(tmp_path, "help", "sync").returncode == 0


def test_sync_rejects_unknown_category(tmp_path):
    assert _run(tmp_path, "sync", "category", "FR", "jazz").returncode == 2


def test_history_with_no_runs(tmp_path):
    result = _run(tmp_path, "history")
    assert result.returncode == 0
    assert "No sync runs recorded" in result.stdout


def test_env_dump_runs(tmp_path):
    result = _run(tmp_path, "env", "dump")
    assert result.returncode == 0
    assert "request_timeout" in result.stdout
