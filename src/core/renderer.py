from typing import Iterable, List, Mapping, Optional, Sequence

from ..checks import SecurityCheck
from ..models.highlight import HighlightSegment, HighlightType
from ..models.http_header import HttpHeader
from ..models.result import CheckResult
from ..utils.logger import ANSI_COLORS
from .highlighter import collect_segments, line_highlight

_TYPE_COLORS = {
    HighlightType.GREEN: ANSI_COLORS["green"],
    HighlightType.YELLOW: ANSI_COLORS["yellow"],
    HighlightType.RED: ANSI_COLORS["red"],
}


def paintable_segments(line: str, segments: Iterable[HighlightSegment]) -> List[HighlightSegment]:
    """Segments sorted by start, dropping any that do not fit or overlap an earlier one."""
    out: List[HighlightSegment] = []
    last_end = 0
    for seg in sorted(segments, key=lambda s: (s.start, s.end)):
        if not seg.is_valid_for(len(line)):
            continue
        if seg.start < last_end:
            continue
        out.append(seg)
        last_end = seg.end
    return out


class HeaderRenderer:
    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors

    def _paint(self, text: str, type: HighlightType) -> str:
        color = _TYPE_COLORS.get(type)
        if not self.use_colors or not color or not text:
            return text
        return f"{color}{text}{ANSI_COLORS['reset']}"

    def render_line(
        self,
        line: str,
        segments: Iterable[HighlightSegment],
        fallback: Optional[HighlightType] = None,
    ) -> str:
        usable = paintable_segments(line, segments)
        if not usable:
            return self._paint(line, fallback or HighlightType.NONE)

        parts: List[str] = []
        pos = 0
        for seg in usable:
            parts.append(line[pos:seg.start])
            parts.append(self._paint(line[seg.start:seg.end], seg.type))
            pos = seg.end
        parts.append(line[pos:])
        return "".join(parts)

    def render_headers(
        self,
        header: HttpHeader,
        checks: Sequence[SecurityCheck],
        results: Mapping[str, CheckResult],
    ) -> str:
        lines = [header.status_line]
        for line in header.raw_lines():
            segments = collect_segments(line, checks, results)
            fallback = line_highlight(line, checks, results)
            lines.append(self.render_line(line, segments, fallback))
        return "\n".join(lines)
