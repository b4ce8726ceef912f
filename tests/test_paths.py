def test_paths_respect_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("CULTURIA_DATA_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("CULTURIA_LOGS_DIR", str(tmp_path / "logs"))

    from culturia_sync.env import paths

    assert paths.data_dir().exists()
    assert paths.logs_dir().exists()
    assert paths.credential_file().parent == tmp_path / "state"
    assert paths.playlist_records_file().parent == tmp_path / "state"
    assert paths.sync_log_file().name.endswith(".jsonl")


def test_submissions_file_override(tmp_path, monkeypatch):
    from culturia_sync.env import paths

    assert paths.submissions_file().parent == paths.data_dir()

    monkeypatch.setenv("CULTURIA_SUBMISSIONS_FILE", str(tmp_path / "export.json"))
    assert paths.submissions_file() == tmp_path / "export.json"


def test_log_path_helpers(tmp_path, monkeypatch):
    monkeypatch.setenv("CULTURIA_LOGS_DIR", str(tmp_path))

    from culturia_sync.env import paths

    mod = paths.module_logs_dir("auth")

    assert mod.exists()
    assert mod.parent == tmp_path
