from typing import Any, MutableMapping

from config.patterns import get_prefixes
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from .base import SecurityCheck


class XssProtectionCheck(SecurityCheck):
    """Requires ``X-Content-Type-Options: nosniff`` (exact, case-insensitive).

    The CSP value left in the context by CspCheck is not consulted: a CSP does
    not stand in for nosniff here.
    """

    name = "XSS Protection"
    column_name = "XSS Protection"
    missing_message = "X-Content-Type-Options: nosniff is missing"
    header_prefixes = get_prefixes('xss_protection')

    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        options = header.value_or_empty("X-Content-Type-Options")
        if options.lower() == "nosniff":
            return CheckResult.ok("nosniff", "nosniff")
        return CheckResult.fail("(none)", "")
