from typing import Any, MutableMapping

from config.constants import CONTEXT_KEYS
from config.patterns import get_patterns, get_prefixes
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from .base import SecurityCheck

MSG_WILDCARD = "Access-Control-Allow-Origin is set to '*' (wildcard)"
MSG_ORIGIN_REFLECTION = (
    "Access-Control-Allow-Origin may be reflecting the Origin header (potential misconfiguration)"
)


class CorsCheck(SecurityCheck):
    """Access-Control-Allow-Origin: wildcard fails, echoing the request Origin warns.

    The request Origin is read from the context (pre-seeded by the caller).
    The message explaining a non-OK verdict travels on the result; the check
    keeps no per-evaluation state.
    """

    CONTEXT_KEY_REQUEST_ORIGIN = CONTEXT_KEYS['request_origin']

    name = "CORS"
    column_name = "CORS"
    missing_message = MSG_WILDCARD

    header_prefixes = get_prefixes('cors')
    red_patterns = get_patterns('cors', 'red')
    yellow_patterns = get_patterns('cors', 'yellow')
    green_patterns = get_patterns('cors', 'green')

    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        cors = header.value_or_empty("Access-Control-Allow-Origin")

        if not cors:
            return CheckResult.ok("No CORS", "")

        if cors == "*":
            return CheckResult.fail(cors, cors, message=MSG_WILDCARD)

        request_origin = context.get(self.CONTEXT_KEY_REQUEST_ORIGIN)
        if isinstance(request_origin, str) and request_origin and cors == request_origin:
            return CheckResult.warn(cors, cors, message=MSG_ORIGIN_REFLECTION)

        return CheckResult.ok(cors, cors)
