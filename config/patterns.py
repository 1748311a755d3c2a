from typing import Dict, List, Tuple

# Lowercase line prefixes owned by each check (used to route raw header lines)
HEADER_LINE_PREFIXES: Dict[str, Tuple[str, ...]] = {
    'csp': ('content-security-policy:', 'x-frame-options:'),
    'xss_protection': ('x-content-type-options:',),
    'hsts': ('strict-transport-security:',),
    'content_type': ('content-type:',),
    'cache_control': ('cache-control:',),
    'cookie': ('set-cookie:',),
    'cors': ('access-control-allow-origin:',),
}

# Literal, case-insensitive substrings highlighted per check. Each list is only
# consulted when the check result has the matching status (red=FAIL, yellow=WARN, green=OK).
HIGHLIGHT_PATTERNS: Dict[str, Dict[str, List[str]]] = {
    'csp': {
        'red': ["content-security-policy:"],
        'yellow': [],
        'green': ["frame-ancestors 'none'", "frame-ancestors 'self'"],
    },
    'xss_protection': {'red': [], 'yellow': [], 'green': []},
    'hsts': {'red': [], 'yellow': [], 'green': []},
    'content_type': {'red': [], 'yellow': [], 'green': []},
    'cache_control': {
        'red': [],
        'yellow': ["cache-control:"],
        'green': [],
    },
    'cookie': {
        'red': [],
        'yellow': [],
        'green': ["set-cookie:", "secure"],
    },
    'cors': {
        'red': ["access-control-allow-origin: *"],
        'yellow': ["access-control-allow-origin"],
        'green': ["access-control-allow-origin"],
    },
}

FRAME_ANCESTORS_NONE = "frame-ancestors 'none'"
FRAME_ANCESTORS_SELF = "frame-ancestors 'self'"

CACHE_CONTROL_REQUIRED_DIRECTIVES: Tuple[str, ...] = ("private", "no-store", "no-cache", "must-revalidate")
PRAGMA_REQUIRED_DIRECTIVE = "no-cache"

COOKIE_SECURE_MARKER = " secure"


def get_prefixes(check_key: str) -> Tuple[str, ...]:
    return HEADER_LINE_PREFIXES.get(check_key, ())


def get_patterns(check_key: str, color: str) -> Tuple[str, ...]:
    return tuple(HIGHLIGHT_PATTERNS.get(check_key, {}).get(color, []))
