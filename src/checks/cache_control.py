from typing import Any, MutableMapping

from config.patterns import (
    CACHE_CONTROL_REQUIRED_DIRECTIVES,
    PRAGMA_REQUIRED_DIRECTIVE,
    get_patterns,
    get_prefixes,
)
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from .base import SecurityCheck


class CacheControlCheck(SecurityCheck):
    """Cache directives for sensitive responses.

    Advisory only: the result is OK or WARN, never FAIL, and it is left out of
    the overall status.
    """

    name = "Cache-Control"
    column_name = "Cache-Control"
    missing_message = "Cache-Control is not configured for sensitive data protection"
    affects_overall_status = False

    header_prefixes = get_prefixes('cache_control')
    yellow_patterns = get_patterns('cache_control', 'yellow')

    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        cache = header.value_or_empty("Cache-Control")
        pragma = header.value_or_empty("Pragma")

        secure = (
            all(directive in cache for directive in CACHE_CONTROL_REQUIRED_DIRECTIVES)
            and PRAGMA_REQUIRED_DIRECTIVE in pragma
        )
        if secure:
            return CheckResult.ok(cache, cache)
        if not cache and not pragma:
            return CheckResult.ok("No Cache-Control or Pragma", "")
        return CheckResult.warn(cache, cache)
