from typing import Any, MutableMapping

from config.patterns import get_prefixes
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from .base import SecurityCheck


class HstsCheck(SecurityCheck):
    # presence only; directives such as max-age=0 are not validated
    name = "HSTS"
    column_name = "HSTS"
    missing_message = "Strict-Transport-Security header is missing"
    header_prefixes = get_prefixes('hsts')

    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        hsts = header.value_or_empty("Strict-Transport-Security")
        if hsts:
            return CheckResult.ok(f"Strict-Transport-Security: {hsts}", hsts)
        return CheckResult.fail("(none)", "")
