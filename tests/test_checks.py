import pytest

from src.checks import (
    CacheControlCheck,
    ContentTypeCheck,
    CookieCheck,
    CorsCheck,
    CspCheck,
    HstsCheck,
    XssProtectionCheck,
    default_checks,
)
from src.checks.cookie import truncate
from src.checks.cors import MSG_ORIGIN_REFLECTION, MSG_WILDCARD
from src.models.result import CheckStatus

from .conftest import make_response


def test_default_checks_order():
    names = [c.name for c in default_checks()]
    assert names == [
        "Content-Security-Policy",
        "XSS Protection",
        "HSTS",
        "Content-Type",
        "Cache-Control",
        "Cookies",
        "CORS",
    ]


def test_default_checks_are_fresh_instances():
    first, second = default_checks(), default_checks()
    assert all(a is not b for a, b in zip(first, second))


class TestCspCheck:
    check = CspCheck()

    def test_no_csp_no_xfo_fails(self, context, empty_response):
        result = self.check.evaluate(empty_response, context)
        assert result.is_fail
        assert result.display_value == "(none)"
        assert result.raw_value == ""

    def test_csp_without_frame_ancestors_fails(self, context):
        result = self.check.evaluate(make_response(("Content-Security-Policy", "default-src 'self'")), context)
        assert result.is_fail
        assert result.display_value == "default-src 'self'"
        assert result.raw_value == "default-src 'self'"

    @pytest.mark.parametrize("csp", [
        "default-src https:",
        "script-src 'self' 'unsafe-inline'",
        "frame-ancestors",
        "frame-ancestor 'self'",
        'frame-ancestors "self"',
        "   ",
    ])
    def test_insufficient_csp_fails(self, context, csp):
        assert self.check.evaluate(make_response(("Content-Security-Policy", csp)), context).is_fail

    def test_empty_csp_value_fails_as_none(self, context):
        result = self.check.evaluate(make_response(("Content-Security-Policy", "")), context)
        assert result.display_value == "(none)"

    @pytest.mark.parametrize("value", ["frame-ancestors 'none'", "frame-ancestors 'self'"])
    def test_frame_ancestors_ok(self, context, value):
        csp = f"default-src 'self'; {value}"
        result = self.check.evaluate(make_response(("Content-Security-Policy", csp)), context)
        assert result.is_ok
        assert result.display_value == value
        assert result.raw_value == csp

    def test_xfo_only_ok(self, context):
        result = self.check.evaluate(make_response(("X-Frame-Options", "DENY")), context)
        assert result.is_ok
        assert result.display_value == "X-Frame-Options:DENY"
        assert result.raw_value == "X-Frame-Options: DENY"

    def test_frame_ancestors_takes_precedence_over_xfo(self, context):
        header = make_response(
            ("Content-Security-Policy", "frame-ancestors 'self'"),
            ("X-Frame-Options", "SAMEORIGIN"),
        )
        assert self.check.evaluate(header, context).display_value == "frame-ancestors 'self'"

    def test_stores_csp_in_context(self, context):
        csp = "default-src 'self'; frame-ancestors 'none'"
        self.check.evaluate(make_response(("Content-Security-Policy", csp)), context)
        assert context[CspCheck.CONTEXT_KEY] == csp

    def test_stores_empty_csp_in_context(self, context, empty_response):
        self.check.evaluate(empty_response, context)
        assert context[CspCheck.CONTEXT_KEY] == ""

    @pytest.mark.parametrize("line,expected", [
        ("content-security-policy: default-src 'self'", True),
        ("x-frame-options: DENY", True),
        ("content-type: text/html", False),
        ("", False),
        ("x-content-security-policy: default-src 'self'", False),
    ])
    def test_matches_header_line(self, line, expected):
        assert self.check.matches_header_line(line) is expected

    def test_green_patterns(self):
        assert "frame-ancestors 'none'" in self.check.green_patterns
        assert "frame-ancestors 'self'" in self.check.green_patterns


class TestXssProtectionCheck:
    check = XssProtectionCheck()

    def test_missing_fails(self, context, empty_response):
        result = self.check.evaluate(empty_response, context)
        assert result.is_fail
        assert result.display_value == "(none)"

    def test_csp_in_context_does_not_substitute(self, context, empty_response):
        context[CspCheck.CONTEXT_KEY] = "default-src 'self'"
        assert self.check.evaluate(empty_response, context).is_fail

    @pytest.mark.parametrize("value", ["sniff", "", "nosniff2", "no sniff"])
    def test_wrong_value_fails(self, context, value):
        assert self.check.evaluate(make_response(("X-Content-Type-Options", value)), context).is_fail

    @pytest.mark.parametrize("value", ["nosniff", "NOSNIFF", "NoSniff", " nosniff "])
    def test_nosniff_ok(self, context, value):
        result = self.check.evaluate(make_response(("X-Content-Type-Options", value)), context)
        assert result.is_ok
        assert result.display_value == "nosniff"

    @pytest.mark.parametrize("line,expected", [
        ("x-content-type-options: nosniff", True),
        ("content-type: text/html", False),
        ("x-xss-protection: 1; mode=block", False),
        ("", False),
    ])
    def test_matches_header_line(self, line, expected):
        assert self.check.matches_header_line(line) is expected

    def test_metadata(self):
        assert self.check.name == "XSS Protection"
        assert self.check.column_name == "XSS Protection"
        assert self.check.missing_message == "X-Content-Type-Options: nosniff is missing"


class TestHstsCheck:
    check = HstsCheck()

    @pytest.mark.parametrize("header", [
        make_response(),
        make_response(("Strict-Transport-Security", "")),
        make_response(("Strict-Transport-Security", "   ")),
    ])
    def test_missing_or_blank_fails(self, context, header):
        result = self.check.evaluate(header, context)
        assert result.is_fail
        assert result.display_value == "(none)"

    @pytest.mark.parametrize("value", [
        "invalid-directive",
        "max-age=0",
        "max-age=-1",
        "max-age=31536000; includeSubDomains",
        "max-age=63072000; includeSubDomains; preload",
    ])
    def test_presence_is_enough(self, context, value):
        result = self.check.evaluate(make_response(("Strict-Transport-Security", value)), context)
        assert result.is_ok
        assert result.display_value == f"Strict-Transport-Security: {value}"
        assert result.raw_value == value

    @pytest.mark.parametrize("line,expected", [
        ("strict-transport-security: max-age=31536000", True),
        ("content-security-policy: default-src 'self'", False),
        ("", False),
        ("x-strict-transport-security: max-age=31536000", False),
    ])
    def test_matches_header_line(self, line, expected):
        assert self.check.matches_header_line(line) is expected


class TestContentTypeCheck:
    check = ContentTypeCheck()

    def test_missing_header_ok(self, context, empty_response):
        assert self.check.evaluate(empty_response, context).is_ok

    @pytest.mark.parametrize("value", [
        "text/html",
        "TEXT/HTML",
        "Text/Html",
        "text/html; boundary=something",
        "text/htmlx",
    ])
    def test_html_without_charset_fails(self, context, value):
        result = self.check.evaluate(make_response(("Content-Type", value)), context)
        assert result.is_fail
        assert result.display_value == "No charset"
        assert result.raw_value == value

    @pytest.mark.parametrize("value", [
        "text/html; charset=",
        "text/html; charset=utf-8",
        "text/html; charset=ISO-8859-1",
        "text/html; boundary=x; charset=utf-8",
        "application/json",
        "text/plain",
        "image/png",
        "application/xml",
        "application/xhtml+xml",
        "",
        "   ",
    ])
    def test_ok_values(self, context, value):
        result = self.check.evaluate(make_response(("Content-Type", value)), context)
        assert result.is_ok
        assert result.display_value == value.strip()

    def test_missing_message(self):
        assert self.check.missing_message == "Content-Type header is missing charset for text/html"


class TestCacheControlCheck:
    check = CacheControlCheck()
    SECURE = "private, no-store, no-cache, must-revalidate"

    def test_nothing_configured_ok(self, context, empty_response):
        result = self.check.evaluate(empty_response, context)
        assert result.is_ok
        assert result.display_value == "No Cache-Control or Pragma"

    @pytest.mark.parametrize("cache", [
        "private",
        "no-store",
        "no-cache",
        "must-revalidate",
        "private, no-store",
        "public, max-age=3600",
        "max-age=0",
    ])
    def test_partial_cache_control_warns(self, context, cache):
        result = self.check.evaluate(make_response(("Cache-Control", cache)), context)
        assert result.is_warn
        assert result.display_value == cache

    def test_all_directives_without_pragma_warns(self, context):
        assert self.check.evaluate(make_response(("Cache-Control", self.SECURE)), context).is_warn

    def test_only_pragma_warns(self, context):
        result = self.check.evaluate(make_response(("Pragma", "no-cache")), context)
        assert result.is_warn
        assert result.display_value == ""

    def test_typo_warns(self, context):
        header = make_response(
            ("Cache-Control", "private, no-stor, no-cache, must-revalidate"),
            ("Pragma", "no-cache"),
        )
        assert self.check.evaluate(header, context).is_warn

    @pytest.mark.parametrize("cache", [SECURE, SECURE + ", max-age=0"])
    def test_secure_config_ok(self, context, cache):
        header = make_response(("Cache-Control", cache), ("Pragma", "no-cache"))
        result = self.check.evaluate(header, context)
        assert result.is_ok
        assert result.display_value == cache

    @pytest.mark.parametrize("cache", ["", "   "])
    def test_blank_cache_control_ok(self, context, cache):
        assert self.check.evaluate(make_response(("Cache-Control", cache)), context).is_ok

    def test_never_affects_overall_status(self):
        assert self.check.affects_overall_status is False

    @pytest.mark.parametrize("line,expected", [
        ("cache-control: no-cache", True),
        ("pragma: no-cache", False),
        ("", False),
    ])
    def test_matches_header_line(self, line, expected):
        assert self.check.matches_header_line(line) is expected


class TestCookieCheck:
    check = CookieCheck()

    def test_no_cookies_ok(self, context, empty_response):
        result = self.check.evaluate(empty_response, context)
        assert result.is_ok
        assert result.display_value == "No cookies"
        assert context[CookieCheck.CONTEXT_KEY] == []

    def test_secure_cookie_ok(self, context):
        result = self.check.evaluate(make_response(("Set-Cookie", "session=abc123; Secure")), context)
        assert result.is_ok
        assert result.display_value == "session=abc123; Secure"

    def test_missing_secure_fails(self, context):
        assert self.check.evaluate(make_response(("Set-Cookie", "session=abc123; HttpOnly")), context).is_fail

    def test_leading_secure_does_not_count(self, context):
        assert self.check.evaluate(make_response(("Set-Cookie", "Secure; session=abc123")), context).is_fail

    def test_secure_inside_value_does_not_count(self, context):
        assert self.check.evaluate(make_response(("Set-Cookie", "data=this_is_secure_data")), context).is_fail

    @pytest.mark.parametrize("flag", ["SECURE", "SeCuRe", "secure"])
    def test_flag_is_case_insensitive(self, context, flag):
        assert self.check.evaluate(make_response(("Set-Cookie", f"id=1; {flag}")), context).is_ok

    def test_one_insecure_cookie_fails_all(self, context):
        header = make_response(
            ("Set-Cookie", "a=1; Secure; HttpOnly"),
            ("Set-Cookie", "b=2; HttpOnly"),
        )
        result = self.check.evaluate(header, context)
        assert result.is_fail
        assert result.display_value == "a=1; Secure; HttpOnly; b=2; HttpOnly"
        assert context[CookieCheck.CONTEXT_KEY] == ["a=1; Secure; HttpOnly", "b=2; HttpOnly"]

    def test_long_cookie_truncated_in_display_only(self, context):
        cookie = "token=" + "x" * 150 + "; Secure"
        result = self.check.evaluate(make_response(("Set-Cookie", cookie)), context)
        assert result.display_value == cookie[:100] + "..."
        assert result.raw_value == cookie

    def test_truncate(self):
        assert truncate("abc", 3) == "abc"
        assert truncate("abcd", 3) == "abc..."

    @pytest.mark.parametrize("line,expected", [
        ("set-cookie: id=1; Secure", True),
        ("Set-Cookie: id=1; SECURE", True),
        ("set-cookie: id=1", False),
    ])
    def test_has_secure_flag(self, line, expected):
        assert CookieCheck.has_secure_flag(line) is expected

    @pytest.mark.parametrize("line,expected", [
        ("set-cookie: id=1", True),
        ("cookie: id=1", False),
        ("", False),
    ])
    def test_matches_header_line(self, line, expected):
        assert self.check.matches_header_line(line) is expected


class TestCorsCheck:
    check = CorsCheck()

    def test_no_header_ok(self, context, empty_response):
        result = self.check.evaluate(empty_response, context)
        assert result.is_ok
        assert result.display_value == "No CORS"

    @pytest.mark.parametrize("value", ["*", " * "])
    def test_wildcard_fails(self, context, value):
        result = self.check.evaluate(make_response(("Access-Control-Allow-Origin", value)), context)
        assert result.is_fail
        assert result.display_value == "*"
        assert self.check.message_for(result) == MSG_WILDCARD

    @pytest.mark.parametrize("value", [
        "* *",
        "https://*.example.com",
        "https://example.com",
        "http://example.com",
        "null",
        "https://example.com:8443",
        "https://example.com/path",
    ])
    def test_specific_origin_ok(self, context, value):
        result = self.check.evaluate(make_response(("Access-Control-Allow-Origin", value)), context)
        assert result.is_ok
        assert result.display_value == value

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_header_ok(self, context, value):
        result = self.check.evaluate(make_response(("Access-Control-Allow-Origin", value)), context)
        assert result.display_value == "No CORS"

    def test_origin_reflection_warns(self, context):
        context[CorsCheck.CONTEXT_KEY_REQUEST_ORIGIN] = "https://dev.example.com"
        result = self.check.evaluate(make_response(("Access-Control-Allow-Origin", "https://dev.example.com")), context)
        assert result.is_warn
        assert result.message == MSG_ORIGIN_REFLECTION
        assert self.check.message_for(result) == MSG_ORIGIN_REFLECTION

    def test_different_origin_ok(self, context):
        context[CorsCheck.CONTEXT_KEY_REQUEST_ORIGIN] = "https://a.example.com"
        result = self.check.evaluate(make_response(("Access-Control-Allow-Origin", "https://b.example.com")), context)
        assert result.is_ok
        assert result.display_value == "https://b.example.com"

    @pytest.mark.parametrize("origin", [None, "", 42])
    def test_missing_or_unusable_origin_ok(self, context, origin):
        if origin is not None:
            context[CorsCheck.CONTEXT_KEY_REQUEST_ORIGIN] = origin
        assert self.check.evaluate(make_response(("Access-Control-Allow-Origin", "https://x.example")), context).is_ok

    def test_wildcard_fails_even_with_origin(self, context):
        context[CorsCheck.CONTEXT_KEY_REQUEST_ORIGIN] = "*"
        assert self.check.evaluate(make_response(("Access-Control-Allow-Origin", "*")), context).is_fail

    def test_message_does_not_leak_between_evaluations(self, context):
        context[CorsCheck.CONTEXT_KEY_REQUEST_ORIGIN] = "https://a.example"
        warned = self.check.evaluate(make_response(("Access-Control-Allow-Origin", "https://a.example")), context)
        failed = self.check.evaluate(make_response(("Access-Control-Allow-Origin", "*")), context)
        assert self.check.message_for(warned) == MSG_ORIGIN_REFLECTION
        assert self.check.message_for(failed) == MSG_WILDCARD

    @pytest.mark.parametrize("line,expected", [
        ("access-control-allow-origin: https://example.com", True),
        ("access-control-allow-methods: GET, POST", False),
        ("content-type: application/json", False),
        ("", False),
    ])
    def test_matches_header_line(self, line, expected):
        assert self.check.matches_header_line(line) is expected

    def test_missing_message(self):
        assert self.check.missing_message == "Access-Control-Allow-Origin is set to '*' (wildcard)"


def test_context_key_values():
    assert CspCheck.CONTEXT_KEY == "csp"
    assert CookieCheck.CONTEXT_KEY == "cookies"
    assert CorsCheck.CONTEXT_KEY_REQUEST_ORIGIN == "requestOrigin"


def test_status_enum_has_three_values():
    assert {s.value for s in CheckStatus} == {"OK", "WARN", "FAIL"}
