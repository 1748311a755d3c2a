from typing import Any, MutableMapping

from config.patterns import get_prefixes
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from .base import SecurityCheck


class ContentTypeCheck(SecurityCheck):
    name = "Content-Type"
    column_name = "Content-Type"
    missing_message = "Content-Type header is missing charset for text/html"
    header_prefixes = get_prefixes('content_type')

    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        content_type = header.value_or_empty("Content-Type")
        lowered = content_type.lower()

        # charset is only required for HTML
        if "text/html" in lowered and "charset=" not in lowered:
            return CheckResult.fail("No charset", content_type)
        return CheckResult.ok(content_type, content_type)
