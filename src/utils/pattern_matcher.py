import re
import threading
from typing import Dict, List, Tuple


class PatternMatcher:
    """Case-insensitive literal substring finder.

    Patterns are escaped before compiling, so header text such as
    ``frame-ancestors 'none'`` or ``access-control-allow-origin: *`` is matched
    verbatim. Compiled patterns are cached per matcher.
    """

    def __init__(self, flags: int = re.IGNORECASE):
        self.flags = flags
        self.compiled_patterns: Dict[str, re.Pattern] = {}
        self._lock = threading.Lock()

    def compile(self, pattern: str) -> re.Pattern:
        compiled = self.compiled_patterns.get(pattern)
        if compiled is None:
            compiled = re.compile(re.escape(pattern), self.flags)
            with self._lock:
                self.compiled_patterns[pattern] = compiled
        return compiled

    def find_spans(self, text: str, pattern: str) -> List[Tuple[int, int]]:
        """Every non-overlapping occurrence, left to right."""
        needle = (pattern or "").strip()
        if not text or not needle:
            return []
        return [m.span() for m in self.compile(needle).finditer(text)]


pattern_matcher = PatternMatcher()
