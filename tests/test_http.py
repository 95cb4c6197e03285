import pytest
from requests import exceptions as req_exc

from netprobe import http_check
from netprobe.error_kinds import (
    HTTP_OK,
    HTTP_5XX,
    HTTP_TIMEOUT,
    HTTP_SSL,
    HTTP_CONN_ERROR,
    HTTP_DNS_ERROR,
    HTTP_INVALID_URL,
)


class FakeResp:
    def __init__(self, status_code):
        self.status_code = status_code
        self.content = b""
        self.history = []


def _returning(status_code, seen=None):
    def fake_get(url, timeout=None, allow_redirects=None, **kwargs):
        if seen is not None:
            seen.update(url=url, timeout=timeout, allow_redirects=allow_redirects)
        return FakeResp(status_code)

    return fake_get


def _raising(exc):
    def fake_get(*a, **k):
        raise exc

    return fake_get


def test_200_is_success_and_follows_redirects(monkeypatch):
    seen = {}
    monkeypatch.setattr(http_check.requests, "get", _returning(200, seen))
    r = http_check.run_http("https://example.test/", timeout=2.0)
    assert r.success is True
    assert r.status_code == 200
    assert r.error_kind == HTTP_OK
    assert isinstance(r.elapsed_ms, int) and r.elapsed_ms >= 0
    assert seen == {"url": "https://example.test/", "timeout": 2.0, "allow_redirects": True}


@pytest.mark.parametrize("code", [101, 204, 302, 401, 403, 404, 499])
def test_below_500_is_success(monkeypatch, code):
    monkeypatch.setattr(http_check.requests, "get", _returning(code))
    r = http_check.run_http("https://example.test/", timeout=1.0)
    assert r.success is True
    assert r.status_code == code


@pytest.mark.parametrize("code", [500, 503])
def test_5xx_is_failure(monkeypatch, code):
    monkeypatch.setattr(http_check.requests, "get", _returning(code))
    r = http_check.run_http("https://example.test/", timeout=1.0)
    assert r.success is False
    assert r.status_code == code
    assert r.error_kind == HTTP_5XX


@pytest.mark.parametrize("exc, kind", [
    (req_exc.ConnectTimeout("connect timed out"), HTTP_TIMEOUT),
    (req_exc.ReadTimeout("read timed out"), HTTP_TIMEOUT),
    (req_exc.SSLError("certificate verify failed"), HTTP_SSL),
    (req_exc.ConnectionError("Failed to resolve 'nowhere.invalid'"), HTTP_DNS_ERROR),
    (req_exc.ConnectionError("conn refused"), HTTP_CONN_ERROR),
])
def test_no_response_is_failure_with_status_0(monkeypatch, exc, kind):
    monkeypatch.setattr(http_check.requests, "get", _raising(exc))
    r = http_check.run_http("https://example.test/", timeout=0.1)
    assert r.success is False
    assert r.status_code == 0
    assert r.error_kind == kind
    assert r.error_message


def test_invalid_url_never_leaves(monkeypatch):
    monkeypatch.setattr(http_check.requests, "get", _raising(req_exc.MissingSchema("No scheme supplied")))
    r = http_check.run_http("intranet/home", timeout=1.0)
    assert r.success is False
    assert r.elapsed_ms == 0
    assert r.error_kind == HTTP_INVALID_URL
