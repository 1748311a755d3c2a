from typing import Any, MutableMapping, Optional

from config.constants import CONTEXT_KEYS
from config.patterns import FRAME_ANCESTORS_NONE, FRAME_ANCESTORS_SELF, get_patterns, get_prefixes
from ..models.highlight import HighlightType
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from .base import SecurityCheck


class CspCheck(SecurityCheck):
    """Clickjacking protection through CSP frame-ancestors or X-Frame-Options.

    The CSP value is always written to the context (empty string when
    absent) for checks that run later.
    """

    CONTEXT_KEY = CONTEXT_KEYS['csp']

    name = "Content-Security-Policy"
    column_name = "CSP"
    missing_message = "Content-Security-Policy with frame-ancestors or X-Frame-Options is missing"

    header_prefixes = get_prefixes('csp')
    red_patterns = get_patterns('csp', 'red')
    yellow_patterns = get_patterns('csp', 'yellow')
    green_patterns = get_patterns('csp', 'green')

    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        csp = header.value_or_empty("Content-Security-Policy")
        xfo = header.value_or_empty("X-Frame-Options")

        context[self.CONTEXT_KEY] = csp

        if FRAME_ANCESTORS_NONE in csp:
            return CheckResult.ok(FRAME_ANCESTORS_NONE, csp)
        if FRAME_ANCESTORS_SELF in csp:
            return CheckResult.ok(FRAME_ANCESTORS_SELF, csp)
        if xfo:
            return CheckResult.ok(f"X-Frame-Options:{xfo}", f"X-Frame-Options: {xfo}")
        if not csp:
            return CheckResult.fail("(none)", "")
        return CheckResult.fail(csp, csp)

    def highlight_type(self, line: str, result: Optional[CheckResult]) -> HighlightType:
        # CSP lines are painted by pattern segments, X-Frame-Options lines as a whole
        if line.lower().startswith("x-frame-options:"):
            return super().highlight_type(line, result)
        return HighlightType.NONE
