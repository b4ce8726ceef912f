import json
import socket

import httplib2
import pytest
from googleapiclient.errors import HttpError

from culturia_sync.auth.errors import AuthRefreshFailed
from culturia_sync.providers.youtube.api_manager import (
    QuotaTripwire,
    RemoteRejected,
    RemoteUnavailable,
    classify_http_error,
    execute_with_retry,
)


def _http_error(status, reason="", message="boom"):
    body = {"error": {"code": status, "message": message, "errors": []}}
    if reason:
        body["error"]["errors"].append({"reason": reason, "message": message})
    return HttpError(httplib2.Response({"status": status}), json.dumps(body).encode("utf-8"))


class Flaky:
    def __init__(self, *failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


@pytest.mark.parametrize(
    "status,reason,expected",
    [
        (500, "backendError", RemoteUnavailable),
        (503, "", RemoteUnavailable),
        (429, "", RemoteUnavailable),
        (403, "rateLimitExceeded", RemoteUnavailable),
        (403, "quotaExceeded", RemoteRejected),
        (404, "playlistNotFound", RemoteRejected),
        (400, "invalidValue", RemoteRejected),
        (401, "authError", AuthRefreshFailed),
    ],
)
def test_classification(status, reason, expected):
    assert isinstance(classify_http_error(_http_error(status, reason), "op"), expected)


def test_rejected_carries_reason():
    err = classify_http_error(_http_error(404, "playlistNotFound"), "playlistItems.list")

    assert err.status == 404
    assert err.is_playlist_not_found
    assert err.is_not_found
    assert "playlistItems.list" in str(err)


def test_duplicate_detection():
    assert RemoteRejected("x", status=409, reason="").is_duplicate
    assert RemoteRejected("x", status=400, reason="videoAlreadyInPlaylist").is_duplicate
    assert not RemoteRejected("x", status=400, reason="invalidValue").is_duplicate


def test_transient_failure_retried_once():
    sleeps = []
    op = Flaky(_http_error(503))

    assert execute_with_retry(op, "op", max_retries=1, backoff_base=0.5, sleep=sleeps.append) == "ok"
    assert op.calls == 2
    assert sleeps == [0.5]


def test_retry_is_bounded():
    op = Flaky(_http_error(503), _http_error(502), _http_error(500))

    with pytest.raises(RemoteUnavailable):
        execute_with_retry(op, "op", max_retries=1, sleep=lambda s: None)
    assert op.calls == 2


def test_timeout_is_unavailable():
    op = Flaky(socket.timeout("timed out"), socket.timeout("timed out"))

    with pytest.raises(RemoteUnavailable) as exc:
        execute_with_retry(op, "playlists.list", max_retries=1, sleep=lambda s: None)
    assert "timeout" in str(exc.value).lower()


def test_rejected_is_not_retried():
    op = Flaky(_http_error(400, "invalidValue"))

    with pytest.raises(RemoteRejected):
        execute_with_retry(op, "op", max_retries=3, sleep=lambda s: None)
    assert op.calls == 1


def test_programming_errors_propagate():
    op = Flaky(KeyError("id"))

    with pytest.raises(KeyError):
        execute_with_retry(op, "op", sleep=lambda s: None)


def test_quota_trips_the_wire():
    tripwire = QuotaTripwire()
    op = Flaky(_http_error(403, "quotaExceeded"))

    with pytest.raises(RemoteRejected) as first:
        execute_with_retry(op, "op", tripwire=tripwire, sleep=lambda s: None)
    assert first.value.is_quota
    assert tripwire.exhausted

    second = Flaky()
    with pytest.raises(RemoteRejected):
        execute_with_retry(second, "op", tripwire=tripwire, sleep=lambda s: None)
    assert second.calls == 0


def test_reset_clears_the_wire():
    tripwire = QuotaTripwire()
    tripwire.mark()
    tripwire.reset()

    op = Flaky()
    assert execute_with_retry(op, "op", tripwire=tripwire, sleep=lambda s: None) == "ok"
    assert op.calls == 1


def test_no_attempts_raises_unavailable():
    op = Flaky()

    with pytest.raises(RemoteUnavailable) as exc:
        execute_with_retry(op, "op", max_retries=-1, sleep=lambda s: None)
    assert "not attempted" in str(exc.value)
    assert op.calls == 0
