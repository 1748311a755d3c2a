from typing import List, Mapping, Sequence

from ..checks import CookieCheck, SecurityCheck
from ..models.highlight import HighlightSegment, HighlightType
from ..models.result import CheckResult
from ..utils.segment_layout import SegmentLayout

__all__ = ["collect_segments", "line_highlight"]


def collect_segments(
    line: str,
    checks: Sequence[SecurityCheck],
    results: Mapping[str, CheckResult],
) -> List[HighlightSegment]:
    """Segments for one raw header line from every check that owns it.

    All checks share one layout, so a span claimed by one check is not
    painted again by another with lower priority.
    """
    if not line:
        return []
    layout = SegmentLayout()
    lowered = line.lower()
    for check in checks:
        if not check.matches_header_line(lowered):
            continue
        check.highlight_segments(line, results.get(check.name), layout=layout)
    return layout.segments()


def line_highlight(
    line: str,
    checks: Sequence[SecurityCheck],
    results: Mapping[str, CheckResult],
) -> HighlightType:
    """Whole-line colour used when no segment applies."""
    for check in checks:
        color = check.highlight_type(line, results.get(check.name))
        if color is not HighlightType.NONE:
            return color

    if line.lower().startswith("set-cookie:"):
        return HighlightType.GREEN if CookieCheck.has_secure_flag(line) else HighlightType.RED
    return HighlightType.NONE

