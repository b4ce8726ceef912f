import json

import pytest

from culturia_sync.content import ContentQueryError, SubmissionsFile, extract_video_id
from culturia_sync.sync.models import Category


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ?t=42", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://youtube.com/shorts/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://vimeo.com/12345", None),
        ("https://www.youtube.com/watch?v=short", None),
        ("", None),
    ],
)
def test_extract_video_id(url, expected):
    assert extract_video_id(url) == expected


def _write(tmp_path, rows):
    path = tmp_path / "submissions.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return SubmissionsFile(path)


ROWS = [
    {"id": 1, "status": "approved", "country_code": "FR", "category": "music",
     "youtube_url": "https://youtu.be/aaaaaaaaaaa"},
    {"id": 2, "status": "pending", "country_code": "FR", "category": "music",
     "youtube_url": "https://youtu.be/bbbbbbbbbbb"},
    {"id": 3, "status": "approved", "country_code": "JP", "category": "cooking",
     "youtube_video_id": "ccccccccccc"},
    {"id": 4, "status": "approved", "country_code": "FR", "category": "music",
     "youtube_url": "https://youtu.be/ddddddddddd", "youtube_sync_enabled": False},
    {"id": 5, "status": "approved", "country_code": "FR", "category": "comedy",
     "youtube_url": "https://example.com/not-a-video"},
    {"id": 6, "status": "rejected", "country_code": "FR", "category": "music",
     "youtube_video_id": "eeeeeeeeeee"},
]


def test_only_approved_and_enabled(tmp_path):
    refs = _write(tmp_path, ROWS).approved_submissions()

    assert sorted(r.id for r in refs) == ["1", "3"]


def test_filters(tmp_path):
    content = _write(tmp_path, {"submissions": ROWS})

    assert [r.id for r in content.approved_submissions(country="JP")] == ["3"]
    assert [r.id for r in content.approved_submissions(country="FR", category=Category.MUSIC)] == ["1"]
    assert content.approved_submissions(country="FR", category=Category.COOKING) == []


def test_missing_file_is_a_query_error(tmp_path):
    with pytest.raises(ContentQueryError):
        SubmissionsFile(tmp_path / "nope.json").approved_submissions()


def test_wrong_shape_is_a_query_error(tmp_path):
    with pytest.raises(ContentQueryError):
        _write(tmp_path, {"rows": []}).approved_submissions()
