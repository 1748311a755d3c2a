from typing import Tuple

from .base import SecurityCheck, status_highlight
from .csp import CspCheck
from .xss_protection import XssProtectionCheck
from .hsts import HstsCheck
from .content_type import ContentTypeCheck
from .cache_control import CacheControlCheck
from .cookie import CookieCheck
from .cors import CorsCheck, MSG_WILDCARD, MSG_ORIGIN_REFLECTION


def default_checks() -> Tuple[SecurityCheck, ...]:
    """Fresh instances in evaluation order.

    CspCheck must stay ahead of every check that reads the CSP context key.
    """
    return (
        CspCheck(),
        XssProtectionCheck(),
        HstsCheck(),
        ContentTypeCheck(),
        CacheControlCheck(),
        CookieCheck(),
        CorsCheck(),
    )


__all__ = [
    "SecurityCheck",
    "status_highlight",
    "CspCheck",
    "XssProtectionCheck",
    "HstsCheck",
    "ContentTypeCheck",
    "CacheControlCheck",
    "CookieCheck",
    "CorsCheck",
    "MSG_WILDCARD",
    "MSG_ORIGIN_REFLECTION",
    "default_checks",
]
