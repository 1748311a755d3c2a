import pytest

from src.checks.base import SecurityCheck
from src.models.http_header import HttpHeader
from src.models.result import CheckResult


def make_response(*pairs, status_line="HTTP/1.1 200 OK"):
    """Response header from ("Name", "value") pairs, duplicates kept."""
    return HttpHeader.from_pairs(status_line, list(pairs))


def make_request(*pairs, request_line="GET /index.html HTTP/1.1"):
    return HttpHeader.from_pairs(request_line, list(pairs))


def make_pattern_check(prefix="test:", red=(), yellow=(), green=(), name="Test"):
    attrs = {
        "name": name,
        "column_name": name,
        "missing_message": f"{name} missing",
        "header_prefixes": (prefix,),
        "red_patterns": tuple(red),
        "yellow_patterns": tuple(yellow),
        "green_patterns": tuple(green),
        "evaluate": lambda self, header, context: CheckResult.ok("ok", "ok"),
    }
    return type(f"{name}Check", (SecurityCheck,), attrs)()


@pytest.fixture
def context():
    return {}


@pytest.fixture
def empty_response():
    return make_response()
