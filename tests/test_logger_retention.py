def test_retention_prunes_old_logs(tmp_path):
    from culturia_sync.logger.retention import enforce_retention

    for i in range(5):
        (tmp_path / f"{i}.log").write_text("x")

    removed = enforce_retention(tmp_path, keep=2)

    remaining = list(tmp_path.glob("*.log"))
    assert len(remaining) == 2
    assert len(removed) == 3


def test_retention_zero_keeps_everything(tmp_path):
    from culturia_sync.logger.retention import enforce_retention

    for i in range(3):
        (tmp_path / f"{i}.log").write_text("x")

    assert enforce_retention(tmp_path, keep=0) == []
    assert len(list(tmp_path.glob("*.log"))) == 3
