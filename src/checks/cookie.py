from typing import Any, MutableMapping

from config.constants import CONTEXT_KEYS, DEFAULT_CONFIG
from config.patterns import COOKIE_SECURE_MARKER, get_patterns, get_prefixes
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from .base import SecurityCheck


def truncate(value: str, limit: int = DEFAULT_CONFIG['display_truncate_length']) -> str:
    return value[:limit] + "..." if len(value) > limit else value


class CookieCheck(SecurityCheck):
    """Every ``Set-Cookie`` must carry the Secure attribute.

    A cookie counts as secure only when its lowercased value contains
    ``" secure"``; a bare ``Secure`` at the very start of the value does not
    count. The list of cookie strings is stored in the context.
    """

    CONTEXT_KEY = CONTEXT_KEYS['cookies']

    name = "Cookies"
    column_name = "Cookies"
    missing_message = "Set-Cookie is missing 'Secure' flag"

    header_prefixes = get_prefixes('cookie')
    green_patterns = get_patterns('cookie', 'green')

    @staticmethod
    def has_secure_flag(cookie_line: str) -> bool:
        """Loose per-line test used only for colouring single Set-Cookie lines."""
        return "secure" in cookie_line.lower()

    @staticmethod
    def is_secure(cookie: str) -> bool:
        return COOKIE_SECURE_MARKER in cookie.lower()

    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        cookies = header.all_values_of("Set-Cookie")
        context[self.CONTEXT_KEY] = cookies

        if not cookies:
            return CheckResult.ok("No cookies", "")

        display = "; ".join(truncate(c) for c in cookies)
        raw = "; ".join(cookies)

        if all(self.is_secure(c) for c in cookies):
            return CheckResult.ok(display, raw)
        return CheckResult.fail(display, raw)
