import re
from typing import Optional, Tuple
from urllib.parse import unquote

from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from ..models.exceptions import ValidationException

_WHITESPACE = re.compile(r"\s")
# scheme, optional authority, then the raw path up to the query or fragment
_HIER_PART = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:(//[^/?#]*)?([^?#]*)")


def _parse(url: str):
    if not url or not isinstance(url, str) or _WHITESPACE.search(url):
        return None
    try:
        return parse_url(url)
    except (LocationParseError, ValueError):
        return None


def extract_host(url: str) -> Optional[str]:
    """Host component of an absolute URL, or None (relative or unparsable)."""
    parsed = _parse(url)
    if parsed is None or not parsed.scheme:
        return None
    return parsed.host or None


def extract_path(url: str) -> Optional[str]:
    """Path as written in the URL, percent-decoded; ``/`` when empty, None when unparsable.

    Dot segments are kept: ``/static/../admin`` is not collapsed to ``/admin``.
    """
    parsed = _parse(url)
    if parsed is None:
        return None
    if not parsed.scheme:
        # no authority: everything before the query/fragment is path
        path = re.split(r"[?#]", url, maxsplit=1)[0]
    else:
        match = _HIER_PART.match(url)
        path = match.group(2) if match else ""
        if not path.startswith("/"):
            # opaque, e.g. mailto:user@example.com
            path = ""
    return unquote(path) or "/"


class URLValidator:
    def __init__(self):
        self.allowed_schemes = ("http", "https")

    def validate_url(self, url: str) -> Tuple[bool, str]:
        if not url or not isinstance(url, str):
            return False, "URL must be a non-empty string"

        parsed = _parse(url)
        if parsed is None:
            return False, f"URL parsing error: {url}"

        if parsed.scheme not in self.allowed_schemes:
            return False, f"Invalid scheme: {parsed.scheme}"

        if not parsed.host:
            return False, "Missing network location"

        if len(url) > 8192:
            return False, "URL too long"

        return True, ""

    def normalize_target(self, target: str) -> str:
        """Default the scheme to https and validate; raises ValidationException."""
        t = (target or "").strip()
        if t and not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", t):
            t = "https://" + t

        valid, err = self.validate_url(t)
        if not valid:
            raise ValidationException(f"URL validation failed: {err}", field="url", value=target)
        return t


url_validator = URLValidator()
