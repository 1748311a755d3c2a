from unittest import mock

import pytest
import requests

from src.core.fetcher import HeaderFetcher
from src.models.exceptions import NetworkException


class FakeRawHeaders:
    def __init__(self, items):
        self._items = items

    def keys(self):
        seen = []
        for name, _ in self._items:
            if name not in seen:
                seen.append(name)
        return seen

    def getlist(self, name):
        return [v for n, v in self._items if n == name]


def _response(status=200, reason="OK", headers=(), path_url="/", sent=None):
    resp = mock.MagicMock()
    resp.status_code = status
    resp.reason = reason
    resp.raw.version = 11
    resp.raw.headers = FakeRawHeaders(list(headers))
    resp.request.path_url = path_url
    resp.request.headers = sent or {"User-Agent": "test-agent"}
    return resp


@pytest.fixture
def fetcher():
    f = HeaderFetcher(timeout=5, max_retries=0, origin="https://origin.example")
    yield f
    f.close()


def test_fetch_builds_traffic_record(fetcher):
    resp = _response(
        headers=[("Set-Cookie", "a=1; Secure"), ("Set-Cookie", "b=2"), ("Server", "nginx")],
        path_url="/login?next=/",
        sent={"User-Agent": "test-agent", "Origin": "https://origin.example"},
    )
    with mock.patch.object(fetcher.session, "request", return_value=resp) as request:
        record = fetcher.fetch("https://example.com/login?next=/")

    assert record.method == "GET"
    assert record.status_code == 200
    assert record.url == "https://example.com/login?next=/"
    assert record.response_header.status_line == "HTTP/1.1 200 OK"
    assert record.response_header.all_values_of("Set-Cookie") == ["a=1; Secure", "b=2"]
    assert record.request_header.status_line == "GET /login?next=/ HTTP/1.1"
    assert record.request_header.value_of("Host") == "example.com"
    assert record.request_header.value_of("Origin") == "https://origin.example"
    resp.close.assert_called_once()

    kwargs = request.call_args.kwargs
    assert kwargs["headers"]["Origin"] == "https://origin.example"
    assert kwargs["allow_redirects"] is False
    assert kwargs["timeout"] == 5


def test_plain_header_mapping_without_raw_headers(fetcher):
    resp = _response()
    resp.raw.headers = None
    resp.headers = {"Server": "nginx", "X-Frame-Options": "DENY"}
    with mock.patch.object(fetcher.session, "request", return_value=resp):
        record = fetcher.fetch("https://example.com/")

    assert record.response_header.raw_lines() == ["Server: nginx", "X-Frame-Options: DENY"]
    assert record.response_header.value_of("x-frame-options") == "DENY"


def test_method_is_upper_cased(fetcher):
    with mock.patch.object(fetcher.session, "request", return_value=_response(status=204, reason="No Content")) as request:
        record = fetcher.fetch("https://example.com/", method="head")
    assert request.call_args.args[0] == "HEAD"
    assert record.method == "HEAD"
    assert record.response_header.status_code == 204


@pytest.mark.parametrize("error", [
    requests.exceptions.ReadTimeout("slow"),
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.TooManyRedirects("loop"),
])
def test_request_errors_become_network_exceptions(fetcher, error):
    with mock.patch.object(fetcher.session, "request", side_effect=error):
        with pytest.raises(NetworkException) as excinfo:
            fetcher.fetch("https://down.example/")
    assert excinfo.value.context["url"] == "https://down.example/"


def test_proxy_configured():
    with HeaderFetcher(proxy="http://127.0.0.1:8080") as f:
        assert f.session.proxies["https"] == "http://127.0.0.1:8080"
