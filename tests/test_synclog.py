from culturia_sync.sync.models import SyncResult
from culturia_sync.sync.request import SyncRequest
from culturia_sync.synclog import SyncLog


def test_append_and_last(tmp_path):
    log = SyncLog(tmp_path / "sync.jsonl")
    assert log.last() is None

    log.append(SyncRequest.build("all"), SyncResult(success=True, videos_added=4, playlists_created=1))
    log.append(
        SyncRequest.build("category", "FR", "music"),
        SyncResult(success=False, videos_added=2, errors=["FR-music: a", "FR-music: b"]),
    )

    last = log.last()
    assert last["sync_type"] == "category"
    assert last["country_code"] == "FR"
    assert last["category"] == "music"
    assert last["status"] == "partial"
    assert last["videos_synced"] == 2
    assert last["error_message"] == "FR-music: a; FR-music: b"
    assert [e["sync_type"] for e in log.tail(10)] == ["all", "category"]


def test_failed_status_for_fatal_result(tmp_path):
    log = SyncLog(tmp_path / "sync.jsonl")

    entry = log.append(SyncRequest.build("all"), SyncResult.fatal("YouTube not connected."))

    assert entry["status"] == "failed"
    assert entry["country_code"] is None


def test_unparseable_lines_skipped(tmp_path):
    path = tmp_path / "sync.jsonl"
    log = SyncLog(path)
    log.append(SyncRequest.build("all"), SyncResult(success=True))
    with path.open("a", encoding="utf-8") as f:
        f.write("{truncated\n")

    assert len(log.tail(5)) == 1
